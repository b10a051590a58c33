"""Custom exceptions for flutter-cleaner."""


class FlutterCleanerError(Exception):
    """Base exception for all flutter-cleaner errors."""


class UnsupportedPlatformError(FlutterCleanerError):
    """Raised when a cache store does not exist on the host operating system."""

    def __init__(self, store: str, supported: str):
        self.store = store
        self.supported = supported
        super().__init__(f"{store} is only supported on {supported}")


class ConfigError(FlutterCleanerError):
    """Raised when a configuration file cannot be written."""


class InvalidStateTransition(FlutterCleanerError):
    """Raised when a store cleanup is driven out of order."""

    def __init__(self, store: str, current: str, target: str):
        self.store = store
        self.current = current
        self.target = target
        super().__init__(f"{store}: cannot move from {current} to {target}")
