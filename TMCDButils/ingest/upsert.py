"""Preallocate-then-update write protocol for monitor samples."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence, Union

from ..model import DocumentID, Sample
from ..skeleton.preallocate import skeleton_for
from .context import IngestContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UpsertResult:
    document_id: DocumentID
    preallocated: bool
    fields: int


class Upserter:
    """Apply samples of one document, preallocating its skeleton on first sight.

    It is highly recommended to preallocate a document before updating it:
    updating a document that was never preallocated makes it grow leaf by
    leaf, which is much slower.
    """

    def __init__(self, context: IngestContext):
        self.context = context

    def upsert(self, samples: Union[Sample, Sequence[Sample]], preallocate: bool = True) -> UpsertResult:
        """Write one sample, or several samples sharing one document, in one update.

        Document level fields are taken from the first sample. Samples
        sharing a time slot collapse into one field, the last one winning;
        both ``UpsertResult.fields`` and the update counter count distinct
        fields written.
        """
        if isinstance(samples, Sample):
            samples = [samples]
        if not samples:
            raise ValueError("List of samples cannot be empty")

        first = samples[0]
        document_id = first.document_id
        if any(sample.document_id != document_id for sample in samples[1:]):
            raise ValueError(f"All samples must belong to document {document_id}")

        ctx = self.context
        collection = ctx.router.resolve(document_id)
        key = str(document_id)

        preallocated = False
        if preallocate and not self.is_document_created(collection, key):
            skeleton = skeleton_for(first.metadata, len(first.value), ctx.templates)
            ctx.stats.record_preallocation()
            preallocated = ctx.backend.insert_document(collection, skeleton)
            if not preallocated:
                logger.debug("Skeleton %s already inserted by another worker", key)
            ctx.existence.record(key)

        fields = {sample.field_path: sample.value for sample in samples}
        ctx.backend.update_fields(
            collection, key, fields, on_insert={"metadata": first.metadata.to_document()}
        )
        ctx.stats.record_updates(len(fields))
        return UpsertResult(document_id, preallocated, len(fields))

    def is_document_created(self, collection, key: str) -> bool:
        """Check the existence cache, then the store; cache positive probes."""
        if self.context.existence.contains(key):
            return True
        if self.context.backend.document_exists(collection, key):
            self.context.existence.record(key)
            return True
        return False
