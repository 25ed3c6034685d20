"""Movie catalogue models, SQL repository, logger and JSON HTTP handlers."""

__version__ = "0.1.0"
__all__ = ["models", "logger", "storage", "repository", "handlers"]