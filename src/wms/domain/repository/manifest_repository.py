"""Abstract repository for Manifest aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from wms.domain.model.manifest import Manifest


class ManifestRepository(ABC):

    @abstractmethod
    def get_by_id(self, manifest_id: int) -> Manifest | None:
        """Return a manifest by its ID, or None."""

    @abstractmethod
    def list_all(self) -> list[Manifest]:
        """Return every manifest, newest first."""

    @abstractmethod
    def save(self, manifest: Manifest) -> None:
        """Persist a new or updated manifest, assigning an ID if new."""

    @abstractmethod
    def delete(self, manifest_id: int) -> None:
        """Remove a manifest record."""
