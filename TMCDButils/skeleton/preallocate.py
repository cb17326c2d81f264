"""Preallocation engine: full-day and partial-day skeleton documents.

A skeleton is inserted before any real value so that later ``$set``
operations only overwrite existing leaves and never grow the document.
Two shapes are supported:

* ``full_day`` copies the size-class template, every second of the day.
* ``from_time`` walks a simulated clock from a start time to the end of the
  day in steps of ``metadata.sample_time`` seconds, creating only the leaves
  the clock visits.
"""

from __future__ import annotations

from datetime import datetime, time, timedelta
from functools import lru_cache
from itertools import groupby
from operator import itemgetter
from typing import Iterator, Optional, Tuple, Union

from ..model import Metadata
from .templates import SkeletonTemplates, placeholder

TimeLike = Union[time, Tuple[int, int, int]]

MIDNIGHT = time(0, 0, 0)


@lru_cache(maxsize=None)
def default_templates() -> SkeletonTemplates:
    """Return the process-wide template cache, built on first use."""
    return SkeletonTemplates()


def metadata_document(metadata: Metadata) -> dict:
    return metadata.to_document()


def full_day(metadata: Metadata, size: int, templates: Optional[SkeletonTemplates] = None) -> dict:
    """Skeleton with every second of the day, from the template cache."""
    templates = templates or default_templates()
    return templates.materialize(metadata, size)


def _clock(start: datetime, step: timedelta) -> Iterator[Tuple[int, int, int]]:
    """Yield (hour, minute, second) ticks until the day of month changes."""
    current = start
    while current.day == start.day:
        yield current.hour, current.minute, current.second
        current += step


def _seconds_bucket(ticks, value: str) -> dict:
    return {str(second): value for _, _, second in ticks}


def _minutes_bucket(ticks, value: str) -> dict:
    return {
        str(minute): _seconds_bucket(group, value)
        for minute, group in groupby(ticks, key=itemgetter(1))
    }


def _hours_bucket(ticks, value: str) -> dict:
    return {
        str(hour): _minutes_bucket(group, value)
        for hour, group in groupby(ticks, key=itemgetter(0))
    }


def from_time(metadata: Metadata, start: TimeLike, size: int) -> dict:
    """Skeleton from ``start`` through the end of the document's day.

    A minute bucket closes when the simulated hour changes and a second
    bucket closes when the simulated minute changes; the trailing buckets
    are whatever was accumulated when the day rolls over, so intervals that
    do not divide the remaining seconds are not an error.
    """
    if metadata.sample_time <= 0:
        raise ValueError(f"sample_time must be positive, got {metadata.sample_time}")
    if not isinstance(start, time):
        start = time(*start)

    doc_id = metadata.document_id
    day_start = datetime(doc_id.year, doc_id.month, doc_id.day,
                         start.hour, start.minute, start.second)
    ticks = _clock(day_start, timedelta(seconds=metadata.sample_time))

    return {
        "_id": str(doc_id),
        "metadata": metadata_document(metadata),
        "hourly": _hours_bucket(ticks, placeholder(size)),
    }


def skeleton_for(metadata: Metadata, size: int, templates: Optional[SkeletonTemplates] = None) -> dict:
    """Skeleton used by the upsert protocol, starting at 00:00:00.

    Cached size classes come from the template cache; longer values fall
    back to the time-stepped builder, which pads placeholders to any size.
    """
    templates = templates or default_templates()
    if size in templates:
        return templates.materialize(metadata, size)
    return from_time(metadata, MIDNIGHT, size)
