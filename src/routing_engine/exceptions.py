"""Custom exception hierarchy for the routing engine."""


class RoutingEngineError(Exception):
    """Base exception for all routing engine errors."""


class ConfigurationError(RoutingEngineError):
    """Error in system configuration."""


class GenerationError(RoutingEngineError):
    """The language model gateway failed (transport, auth or quota)."""


class RetrievalError(RoutingEngineError):
    """Error during tenant-scoped retrieval."""


class StoreError(RetrievalError):
    """The document store could not be read or written."""


class DeadlineExceeded(RoutingEngineError):
    """The request deadline expired before a gateway call or join completed."""


class CapabilityError(RoutingEngineError):
    """A scheduled capability task failed and the failure policy surfaced it."""

    def __init__(self, capability: str, cause: BaseException) -> None:
        super().__init__(f"{capability} capability failed: {cause}")
        self.capability = capability
        self.cause = cause
