from .id_validator import IdValidator
from .record_store import RecordStore

__all__ = [
    "IdValidator",
    "RecordStore",
]
