from pathlib import Path


class BenchTableError(RuntimeError):
    """Structured error for fatal pipeline failures.

    Attributes:
        kind: Error category for programmatic handling.
        path: File or directory the failure refers to, if any.
    """

    kind = "error"

    def __init__(self, message: str, *, path: Path | None = None):
        super().__init__(message)
        self.path = path


class InvalidInvocationError(BenchTableError):
    kind = "invalid_invocation"


class MissingResourceError(BenchTableError):
    kind = "missing_resource"


class MalformedArtifactError(BenchTableError):
    kind = "malformed_artifact"


class DuplicateGroupError(BenchTableError):
    kind = "duplicate_group"
