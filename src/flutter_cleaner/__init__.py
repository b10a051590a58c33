"""flutter-cleaner - reclaim disk space from Flutter build artifacts and dependency caches."""

__version__ = "1.0.0"
