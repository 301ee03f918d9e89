# errors.py

class PlayerError(Exception):
    """Base class for all player errors."""
    pass


class ProtocolError(PlayerError):
    """Raised when an inbound notification is unknown or carries a bad payload."""
    def __init__(self, message: str, notification: str | None = None):
        super().__init__(message)
        self.notification = notification or "unknown_notification"


class ConfigError(PlayerError):
    """Raised when an explicitly requested configuration file cannot be loaded."""
    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.path = path
