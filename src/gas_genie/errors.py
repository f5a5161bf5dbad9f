"""Application error types.

Services raise these; the API layer maps them to HTTP responses with the
message as the user-visible detail.
"""


class GasGenieError(Exception):
    """Base class for application errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class AuthenticationError(GasGenieError):
    """Raised when a bearer token cannot be resolved to a user."""


class PhotoUploadError(GasGenieError):
    """Raised when the object store rejects a photo upload."""


class PhotoCatalogError(GasGenieError):
    """Raised when a photo was stored but its catalog record was not created."""


class PhotoNotFoundError(GasGenieError):
    """Raised when a photo does not exist or belongs to another user."""


class PhotoDeleteError(GasGenieError):
    """Raised when a user-requested photo deletion fails in the object store."""


class DiagnosisError(GasGenieError):
    """Raised when the vision provider fails to analyse a photo."""


class SearchUnavailableError(GasGenieError):
    """Raised when vector search over regulations cannot be performed."""


class EmbeddingError(GasGenieError):
    """Raised when a search query cannot be embedded."""


class ShareLinkError(GasGenieError):
    """Raised when a customer share link cannot be resolved."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code
