"""
Backup format and portfolio persistence.
"""

from .backup_codec import (
    document_to_snapshot,
    dumps_backup,
    export_backup,
    import_backup,
    snapshot_to_document,
)
from .json_repository import InMemoryRepository, JsonFileRepository

__all__ = [
    "export_backup",
    "dumps_backup",
    "import_backup",
    "snapshot_to_document",
    "document_to_snapshot",
    "JsonFileRepository",
    "InMemoryRepository",
]
