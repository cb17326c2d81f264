"""Skeleton (preallocated placeholder document) construction."""

from .templates import (
    DEFAULT_CHARACTER,
    MAX_VALUE_SIZE,
    NOT_ASSIGNED,
    SkeletonTemplates,
    placeholder,
)
from .preallocate import from_time, full_day, metadata_document, skeleton_for

__all__ = [
    "DEFAULT_CHARACTER",
    "MAX_VALUE_SIZE",
    "NOT_ASSIGNED",
    "SkeletonTemplates",
    "placeholder",
    "from_time",
    "full_day",
    "metadata_document",
    "skeleton_for",
]
