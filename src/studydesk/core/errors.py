"""Error taxonomy shared by the core, the workflows and the adapters."""


class ValidationError(Exception):
    """Malformed user input, rejected before any mutation is attempted."""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class DuplicateFavoriteError(ValidationError):
    """Raised when a quote is already in the user's favorites."""

    def __init__(self, message: str = "This quote is already in your favorites"):
        super().__init__("text", message)


class CollaboratorError(Exception):
    """A persistence, file or network collaborator failed."""

    pass
