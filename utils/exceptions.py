"""Custom exception hierarchy."""


class LocationSpyError(Exception):
    """Base for every project exception."""


class InvalidInputError(LocationSpyError):
    """Query is empty or missing — nothing is aggregated."""


class ConfigurationError(LocationSpyError):
    """Invalid or missing configuration."""



class SourceCancelled(LocationSpyError):
    """The aggregation gave up on a source; raised before its next request."""
