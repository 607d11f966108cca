"""Configuration-backed identity adapter."""

from studydesk.config import Config, load_config
from studydesk.core.errors import CollaboratorError


class AuthenticationError(CollaboratorError):
    """Raised when no signed-in user is available."""

    pass


class ConfigIdentityProvider:
    """
    Identity taken from configuration.

    Implements IdentityProvider protocol. The owner id comes from OWNER_ID
    in studydesk.conf or the STUDYDESK_OWNER environment variable.
    """

    def __init__(self, config: Config | None = None):
        self.config = config or load_config()

    def current_owner(self) -> str:
        if not self.config.owner_id:
            raise AuthenticationError("No user signed in. Set OWNER_ID in config/studydesk.conf or STUDYDESK_OWNER.")
        return self.config.owner_id
