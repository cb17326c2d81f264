"""Size-classed full-day skeleton templates built once per process."""

from __future__ import annotations

from types import MappingProxyType
from typing import Dict, Mapping

from ..exceptions import InvalidSizeError
from ..model import Metadata

NOT_ASSIGNED = "na"
DEFAULT_CHARACTER = "a"
MAX_VALUE_SIZE = 7

HOURS = range(24)
MINUTES = range(60)
SECONDS = range(60)


def placeholder(size: int) -> str:
    """Return the placeholder written into unset leaves for a value size.

    Sizes up to two use the bare marker; larger sizes are padded so the
    placeholder has exactly ``size`` characters and a later overwrite with a
    value of that length does not grow the document.
    """
    if size < 0:
        raise InvalidSizeError(size, MAX_VALUE_SIZE)
    return NOT_ASSIGNED + DEFAULT_CHARACTER * max(size - 2, 0)


def _frozen_hourly(value: str) -> Mapping:
    # Every minute of a generic day is identical, so the read-only second
    # and minute maps are shared.
    seconds = MappingProxyType({str(s): value for s in SECONDS})
    minutes = MappingProxyType({str(m): seconds for m in MINUTES})
    return MappingProxyType({str(h): minutes for h in HOURS})


def thaw_hourly(hourly: Mapping) -> Dict[str, Dict[str, Dict[str, str]]]:
    """Return a fresh, mutable copy of an ``hourly`` tree."""
    return {
        hour: {minute: dict(seconds) for minute, seconds in minutes.items()}
        for hour, minutes in hourly.items()
    }


class SkeletonTemplates:
    """Immutable generic full-day skeletons, one per placeholder size class."""

    def __init__(self, max_size: int = MAX_VALUE_SIZE):
        self.max_size = max_size
        self._templates = tuple(
            MappingProxyType({"hourly": _frozen_hourly(placeholder(size))})
            for size in range(max_size)
        )

    def _check(self, size: int) -> None:
        if not 0 <= size < self.max_size:
            raise InvalidSizeError(size, self.max_size)

    def template(self, size: int) -> Mapping:
        """Return the cached read-only skeleton for ``size``."""
        self._check(size)
        return self._templates[size]

    def materialize(self, metadata: Metadata, size: int) -> dict:
        """Return a new skeleton document with ``_id`` and ``metadata`` overlaid."""
        prototype = self.template(size)
        return {
            "_id": str(metadata.document_id),
            "metadata": metadata.to_document(),
            "hourly": thaw_hourly(prototype["hourly"]),
        }

    def __contains__(self, size) -> bool:
        return isinstance(size, int) and 0 <= size < self.max_size
