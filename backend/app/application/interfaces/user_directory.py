"""Port for the external user directory."""

from abc import ABC, abstractmethod


class UserDirectory(ABC):
    """Resolves user ids to display names. Accounts are owned by the identity system."""

    @abstractmethod
    async def get_display_names(self, user_ids: list[str]) -> dict[str, str]:
        """Map each known id to its display name; unknown ids are omitted."""
        ...
