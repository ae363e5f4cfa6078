"""Exceptions raised while loading and building binding trees.

Validation failures of submitted values are not exceptions: they are
recorded on the nodes and rendered back to the user.
"""


class CbiError(Exception):
    """Base exception for binding tree errors."""


class LoadError(CbiError):
    """Raised when a map script cannot be found, compiled or executed."""

    def __init__(self, name: str, message: str) -> None:
        """Initialize the error.

        Args:
            name: Name of the map script.
            message: Human-readable error description.
        """
        self.name = name
        super().__init__(f"Unable to load map {name!r}: {message}")


class InvalidMapError(CbiError):
    """Raised when a map script does not produce a Map."""

    def __init__(self, name: str, result: object) -> None:
        """Initialize the error.

        Args:
            name: Name of the map script.
            result: The object the script produced instead.
        """
        self.name = name
        self.result = result
        super().__init__(
            f"Map script {name!r} returned no valid map object "
            f"(got {type(result).__name__})"
        )


class StoreReadError(CbiError):
    """Raised when the store cannot supply a namespace for a Map."""

    def __init__(self, config: str) -> None:
        """Initialize the error with the unreadable namespace.

        Args:
            config: The configuration namespace.
        """
        self.config = config
        super().__init__(f"Unable to read configuration data: {config}")
