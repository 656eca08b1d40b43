"""
Exception hierarchy for RSS Relay.

Each error marks how far a failure reaches: configuration errors abort the
process, the others abort only the current poll cycle.
"""


class RelayError(Exception):
    """Base class for all RSS Relay errors."""


class ConfigError(RelayError):
    """Raised when the configuration is missing or invalid at startup."""


class FetchError(RelayError):
    """Raised when the feed cannot be downloaded."""


class ParseError(RelayError):
    """Raised when the downloaded feed cannot be parsed."""


class DeliveryError(RelayError):
    """Raised when a message could not be delivered to the chat destination."""
