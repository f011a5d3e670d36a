class GenerationError(Exception):
    """Base class for exam generation failures."""


class ConfigurationError(GenerationError):
    """Raised when the Gemini API key is not configured."""


class EmptyResponseError(GenerationError):
    """Raised when Gemini returns no content."""


class MalformedResponseError(GenerationError):
    """Raised when the response is not valid JSON or does not match the exam shape."""


class ServiceError(GenerationError):
    """Raised when the Gemini call itself fails (transport, quota, rate limit)."""


class SessionBusyError(Exception):
    """Raised when a session is asked to generate while a request is in flight."""
