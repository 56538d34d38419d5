"""Domain-specific exceptions — framework-independent."""


class MalformedQueryError(TypeError):
    """Raised when the query analyzer receives something other than a string."""

    def __init__(self, received: object):
        self.received_type = type(received).__name__
        super().__init__(f"Query must be a string, got {self.received_type}")


class StorageUnavailableError(Exception):
    """Raised when a read against one record collection fails.

    ``failed_collections`` lists every collection that failed in the same
    fetch, with ``collection`` being the first of them.
    """

    def __init__(
        self,
        collection: str,
        cause: BaseException,
        *,
        failed_collections: tuple[str, ...] = (),
    ):
        self.collection = collection
        self.cause = cause
        self.failed_collections = failed_collections or (collection,)
        super().__init__(f"Storage read failed for '{collection}': {cause}")


class TaggerUnavailableError(Exception):
    """Raised by a grammatical tagger that cannot load or process text.

    Never leaves the entity extractor.
    """


class EntityNotFoundError(Exception):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity_type: str, entity_id: int | str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with id '{entity_id}' not found")


class GenAIProviderError(Exception):
    """Raised when a GenAI provider returns an error.

    Provider-agnostic — works for the AI Cafe gateway and any future backend.
    """

    def __init__(self, provider: str, status_code: int, message: str):
        self.provider = provider
        self.status_code = status_code
        self.message = message
        super().__init__(f"[{provider}] {status_code}: {message}")


class ProviderConfigurationError(ValueError):
    """Raised when GenAI provider settings are invalid or unsupported."""


class ExportError(ValueError):
    """Raised when an export request cannot be satisfied."""


class RateLimitExceededError(Exception):
    """Raised when a client exceeds its request budget for the current window."""

    def __init__(self, client_id: str, limit: int, retry_after: int):
        self.client_id = client_id
        self.limit = limit
        self.retry_after = retry_after
        super().__init__(
            f"Too many requests. Maximum {limit} requests per window allowed."
        )
