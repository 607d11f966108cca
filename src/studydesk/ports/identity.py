"""Authentication interface."""

from typing import Protocol


class IdentityProvider(Protocol):
    """Supplies the identifier of the signed-in user."""

    def current_owner(self) -> str:
        """Owner id used to scope every record query."""
        ...
