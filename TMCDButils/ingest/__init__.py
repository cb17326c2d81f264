"""Legacy record ingestion."""

from .context import IngestContext
from .decoder import decode_record, split_component_name
from .pipeline import IngestionPipeline
from .upsert import Upserter, UpsertResult

__all__ = [
    "IngestContext",
    "IngestionPipeline",
    "Upserter",
    "UpsertResult",
    "decode_record",
    "split_component_name",
]
