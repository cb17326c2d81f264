"""Decode legacy flat monitor records into samples."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Mapping, Tuple

from pydantic import ValidationError as PydanticValidationError

from ..exceptions import DecodeError
from ..model import DocumentID, Metadata, Sample
from ..schemas.validators import LegacyRecord

logger = logging.getLogger(__name__)

# Offset between the legacy source clock and the store's civil time
DEFAULT_HOUR_OFFSET = 3
DEFAULT_PREALLOCATE_TIME = 1


def split_component_name(component_name: str) -> Tuple[str, str]:
    """Return (antenna, component) from a legacy component path.

    ``"CONTROL/DV10/FrontEnd/Cryostat"`` -> ``("DV10", "FrontEnd/Cryostat")``
    ``"CONTROL/DV10/Mount"``            -> ``("DV10", "Mount")``
    ``"ACACORR/CCC_MONITOR"``           -> ``("ACACORR", "CCC_MONITOR")``
    """
    parts = component_name.split("/")
    if len(parts) == 2:
        return parts[0], parts[1]
    if len(parts) == 3:
        return parts[1], parts[2]
    if len(parts) == 4:
        return parts[1], f"{parts[2]}/{parts[3]}"
    logger.error("Unsupported component name: %s", component_name)
    raise DecodeError(f"Unsupported component name: {component_name!r}")


def to_store_time(value: datetime, hour_offset: int = DEFAULT_HOUR_OFFSET) -> datetime:
    """Shift a legacy timestamp into the store's civil time (naive)."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value + timedelta(hours=hour_offset)


def decode_record(
    record: Mapping,
    hour_offset: int = DEFAULT_HOUR_OFFSET,
    sample_time: int = DEFAULT_PREALLOCATE_TIME,
) -> Sample:
    """Build a Sample from one legacy record, raising DecodeError if malformed."""
    try:
        legacy = LegacyRecord.model_validate(record)
    except PydanticValidationError as exc:
        raise DecodeError(f"Invalid legacy record: {exc}", record=record) from exc

    antenna, component = split_component_name(legacy.component_name)
    when = to_store_time(legacy.date, hour_offset)

    try:
        document_id = DocumentID(
            when.year, when.month, when.day, antenna, component, legacy.monitor_point_name
        )
    except ValueError as exc:
        raise DecodeError(str(exc), record=record) from exc

    metadata = Metadata(
        document_id=document_id,
        property=legacy.property_name,
        location=legacy.location,
        serial_number=legacy.serial_number,
        index=legacy.index,
        sample_time=sample_time,
    )
    return Sample(metadata, when.hour, when.minute, when.second, legacy.monitor_value)
