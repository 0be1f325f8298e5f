"""Exceptions raised by serverstats."""


class ServerStatsError(Exception):
    """Base class for serverstats errors."""


class UnsupportedPlatformError(ServerStatsError):
    """The kernel interfaces the report depends on are not readable."""

    def __init__(self, path) -> None:
        super().__init__(f"{path} is not readable")
        self.path = path
