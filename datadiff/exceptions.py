"""Custom exceptions for datadiff."""


class DatadiffError(Exception):
    """Base exception for datadiff errors."""
    exit_code = 1


class UsageError(DatadiffError):
    """Raised when command line flags conflict or are missing."""
    exit_code = 2

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class DocumentParseError(DatadiffError):
    """Raised when an input document cannot be parsed."""
    def __init__(self, path: str, reason: str):
        super().__init__(f"Failed to parse {path}: {reason}")
        self.path = path
        self.reason = reason


class FileAccessError(DatadiffError):
    """Raised when a path cannot be read or written."""
    def __init__(self, path: str, reason: str):
        super().__init__(f"Cannot access {path}: {reason}")
        self.path = path
        self.reason = reason


class SchemaError(DatadiffError):
    """Raised when a saved session file is corrupt or self-inconsistent."""
    def __init__(self, path: str, reason: str):
        super().__init__(f"Invalid session file {path}: {reason}")
        self.path = path
        self.reason = reason
