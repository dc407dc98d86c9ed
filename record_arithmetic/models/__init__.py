from .header import IfType, RecordHeader
from .policy import PolicySet
from .record import Dataset, Record
from .stats import component_stats, dep_stats, is_dataless, payload_size

__all__ = [
    "IfType",
    "RecordHeader",
    "PolicySet",
    "Dataset",
    "Record",
    "component_stats",
    "dep_stats",
    "is_dataless",
    "payload_size",
]
