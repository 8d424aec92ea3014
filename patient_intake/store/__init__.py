"""
Record store and sync staging.
"""

from .record_store import EditableRecordStore, InvalidEditError
from .sync_stager import SyncStager, log_sync_payload

__all__ = [
    "EditableRecordStore",
    "InvalidEditError",
    "SyncStager",
    "log_sync_payload",
]
