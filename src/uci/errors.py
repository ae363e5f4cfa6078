"""Exceptions for configuration store backends."""


class UciStoreError(Exception):
    """Base exception for configuration store backends.

    Raised when a backend cannot be used at all. Individual store calls
    report failure through their return values instead.
    """


class UciBinaryNotFoundError(UciStoreError):
    """Raised when the uci command line tool cannot be executed."""

    def __init__(self, binary: str) -> None:
        """Initialize the error with the missing binary.

        Args:
            binary: Name or path of the uci executable.
        """
        self.binary = binary
        super().__init__(f"uci binary not found: {binary}")


class StoreSeedError(UciStoreError):
    """Raised when a YAML store seed has an unexpected shape."""

    def __init__(self, message: str, *, path: str | None = None) -> None:
        """Initialize the error.

        Args:
            message: Human-readable error description.
            path: Seed file the error refers to.
        """
        self.path = path
        super().__init__(message if path is None else f"{path}: {message}")
