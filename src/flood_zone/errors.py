"""Exceptions raised on the administrative path (provisioning, ingestion).

The resolution path never raises; see ``ResolutionService.resolve``.
"""


class FloodZoneError(Exception):
    """Base class for flood zone errors."""


class MalformedFeatureError(FloodZoneError, ValueError):
    """A feature in an imported collection cannot be turned into a polygon.

    Attributes:
        index: Position of the offending feature in the collection
        reason: Human-readable description of the problem
    """

    def __init__(self, index: int, reason: str) -> None:
        self.index = index
        self.reason = reason
        super().__init__(f"Feature #{index} is malformed: {reason}")
