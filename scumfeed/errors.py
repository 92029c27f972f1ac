"""
SCUM Feed - Error Types
"""


class ScumFeedError(Exception):
    """Base exception for SCUM Feed errors."""
    pass


class ConfigError(ScumFeedError):
    """Configuration file is missing or unreadable."""
    pass


class SourceInitError(ScumFeedError):
    """A log source cannot be started (disabled, no sink, no log directory)."""
    pass


class DispatchError(ScumFeedError):
    """The notification sink rejected or failed to deliver a message."""
    pass
