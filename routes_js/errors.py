"""Exceptions raised by the route helper generator."""


class RoutesJsError(Exception):
    """Base exception of all routes-js errors."""


class ConfigurationError(RoutesJsError, ValueError):
    """A configuration option has an invalid value."""


class RouterNotFoundError(RoutesJsError, ValueError):
    """No route source was given and none could be detected."""


class NameCollisionError(RoutesJsError):
    """Two routes still share a helper name after disambiguation."""

    def __init__(self, name: str, paths: list):
        self.name = name
        self.paths = paths
        joined = ", ".join(paths)
        super().__init__(f"Duplicate route helper name '{name}' for paths: {joined}")
