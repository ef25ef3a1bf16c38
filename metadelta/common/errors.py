"""Error taxonomy shared by every metadelta bounded context."""


class MetadeltaError(Exception):
    """Base class for all metadelta errors."""


class ConfigurationError(MetadeltaError):
    """Raised when required configuration is missing or inconsistent."""


class SourceStreamFailure(MetadeltaError):
    """Raised when the change report could not be produced."""


class UnsupportedStatusCode(MetadeltaError):
    """Raised when a change report line carries a status we cannot map."""

    def __init__(self, line: str) -> None:
        self.line = line
        super().__init__(f"Unsupported status code in change report line: {line!r}")


class ContentFetchFailure(MetadeltaError):
    """Raised when a file cannot be read at a given revision."""

    def __init__(self, path: str, revision: str, reason: str = "") -> None:
        self.path = path
        self.revision = revision
        message = f"Could not read {path} at {revision}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class NotFound(ContentFetchFailure):
    """Raised when a path does not exist at the requested revision."""


class PolicyListNotFound(MetadeltaError):
    """Raised when a configured policy list file does not exist."""


class InvalidStageTransition(MetadeltaError):
    """Raised when the resolution pipeline is driven out of order."""


class InvalidChangeRecord(MetadeltaError, ValueError):
    """Raised when a change record is built from an unusable path."""


class InvalidPolicyPattern(MetadeltaError):
    """Raised when a policy list holds a pattern that cannot be compiled."""

    def __init__(self, pattern: str, reason: str) -> None:
        self.pattern = pattern
        super().__init__(f"Invalid policy pattern {pattern!r}: {reason}")
