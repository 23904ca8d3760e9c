"""Exceptions raised by the search services.

Routers translate these into HTTP responses; services never raise
``HTTPException`` themselves.
"""


class SourceUnavailableError(Exception):
    """A data source timed out, answered with an error or sent garbage."""

    def __init__(self, source: str, message: str) -> None:
        self.source = source
        super().__init__(f"{source}: {message}")


class PreconditionViolation(Exception):
    """The query cannot be run by the selected adapter bundle."""


class LocationNotFoundError(Exception):
    """Geocoding could not resolve a location to coordinates."""

    def __init__(self, location: str) -> None:
        self.location = location
        super().__init__(f"Location not found: {location}")
