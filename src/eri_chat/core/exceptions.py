"""Domain exceptions for Eri Chat."""


class EriChatError(Exception):
    """Base exception for all Eri Chat errors."""


class CompletionError(EriChatError):
    """A single completion request failed."""

    def __init__(
        self,
        message: str,
        model: str | None = None,
        status_code: int | None = None,
    ):
        super().__init__(message)
        self.model = model
        self.status_code = status_code


class CapacityExceeded(CompletionError):
    """Provider is overloaded or rate limiting this model."""


class SchemaRejected(CompletionError):
    """Provider rejected the request shape (usually the tool schema)."""


class CapabilityMissing(CompletionError):
    """Model is unknown to the provider or lacks the requested capability."""


class ProviderError(CompletionError):
    """Unclassified completion failure."""


class CompletionUnavailable(EriChatError):
    """Every model tier failed; no answer can be produced."""

    def __init__(self, message: str = "No completion available"):
        super().__init__(message)


class LookupFailed(EriChatError):
    """Geocoding or weather lookup returned nothing usable."""

    def __init__(self, message: str, query: str | None = None):
        super().__init__(message)
        self.query = query


class ParseFailed(EriChatError):
    """Tool-call arguments could not be parsed."""

    def __init__(self, message: str, raw: str | None = None):
        super().__init__(message)
        self.raw = raw


class TranscriptionFailed(EriChatError):
    """Speech-to-text request failed."""
