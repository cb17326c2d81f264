"""Pydantic models for validating legacy monitor records."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class LegacyRecord(BaseModel):
    """One flat record of the legacy monitor data schema."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", coerce_numbers_to_str=True)

    component_name: str = Field(alias="componentName", min_length=1)
    property_name: str = Field(alias="propertyName")
    monitor_point_name: str = Field(alias="monitorPointName", min_length=1)
    location: str
    serial_number: str = Field(alias="serialNumber")
    monitor_value: str = Field(alias="monitorValue")
    index: int
    date: datetime
