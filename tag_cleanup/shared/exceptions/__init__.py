from tag_cleanup.shared.exceptions.base import TagCleanupError
from tag_cleanup.shared.exceptions.migration import (
    BatchFetchError,
    ConfigurationError,
    DatabaseConnectionError,
    RowUpdateError,
)

__all__ = [
    "TagCleanupError",
    "BatchFetchError",
    "ConfigurationError",
    "DatabaseConnectionError",
    "RowUpdateError",
]
