from __future__ import annotations

from typing import Optional, Protocol

from .model import Organization


class OrganizationRepository(Protocol):
    def get_by_id(self, organization_id: int) -> Optional[Organization]:
        raise NotImplementedError

    def create(self, *, name: str, description: Optional[str]) -> int:
        raise NotImplementedError

    def update(self, organization_id: int, **fields) -> bool:
        """Update any of name, description, is_active."""

        raise NotImplementedError
