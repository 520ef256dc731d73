"""Error taxonomy for the conversation engine."""


class PerspectiveXError(Exception):
    """Base class for all engine errors."""


class ValidationError(PerspectiveXError):
    """User input rejected before any state change (empty or whitespace-only)."""


class PersistenceError(PerspectiveXError):
    """Durable store could not be read, decoded, or written."""


class GenerationError(PerspectiveXError):
    """The remote generation call failed or returned nothing usable."""
