"""Shared state handed to every ingestion worker."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from ..backends.base import StoreBackend
from ..existence import ExistenceCache
from ..router import CollectionRouter
from ..skeleton.preallocate import default_templates
from ..skeleton.templates import SkeletonTemplates
from ..stats import IngestStats
from .decoder import DEFAULT_HOUR_OFFSET, DEFAULT_PREALLOCATE_TIME

if TYPE_CHECKING:
    from ..config import IngestSettings


@dataclass
class IngestContext:
    """Owns the caches and counters shared by all workers of one process."""

    backend: StoreBackend
    router: CollectionRouter
    existence: ExistenceCache = field(default_factory=ExistenceCache)
    templates: SkeletonTemplates = field(default_factory=default_templates)
    stats: IngestStats = field(default_factory=IngestStats)
    preallocate: bool = True
    hour_offset: int = DEFAULT_HOUR_OFFSET
    sample_time: int = DEFAULT_PREALLOCATE_TIME

    @classmethod
    def create(cls, backend: StoreBackend, settings: Optional["IngestSettings"] = None) -> "IngestContext":
        """Build a context from settings, using defaults when none are given."""
        if settings is None:
            return cls(backend=backend, router=CollectionRouter(backend))
        return cls(
            backend=backend,
            router=CollectionRouter(backend, shard=settings.shard_collections),
            existence=ExistenceCache(settings.existence_capacity, settings.existence_stripes),
            stats=IngestStats(settings.progress_every),
            preallocate=settings.preallocate,
            hour_offset=settings.hour_offset,
            sample_time=settings.sample_time,
        )
