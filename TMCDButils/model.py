"""Identity and metadata value types for monitor point documents."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

# Separator of the canonical document id. Antenna and monitor point names
# may not contain it; the component sits in the middle and may.
ID_SEPARATOR = "|"


@dataclass(frozen=True)
class DocumentID:
    """Identifies one monitor point's document for one calendar day.

    ``month`` is 1-based (January = 1) everywhere in the package.
    """

    year: int
    month: int
    day: int
    antenna: str
    component: str
    monitor_point: str

    def __post_init__(self):
        # raises ValueError for impossible dates
        date(self.year, self.month, self.day)
        for name in ("antenna", "monitor_point"):
            value = getattr(self, name)
            if ID_SEPARATOR in value:
                raise ValueError(f"{name} may not contain '{ID_SEPARATOR}': {value!r}")

    @property
    def date_string(self) -> str:
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"

    def __str__(self) -> str:
        return ID_SEPARATOR.join(
            (self.date_string, self.antenna, self.component, self.monitor_point)
        )

    @classmethod
    def parse(cls, value: str) -> "DocumentID":
        """Inverse of ``str(document_id)``."""
        try:
            date_part, antenna, rest = value.split(ID_SEPARATOR, 2)
            component, monitor_point = rest.rsplit(ID_SEPARATOR, 1)
            year, month, day = (int(part) for part in date_part.split("-"))
        except ValueError as exc:
            raise ValueError(f"Malformed document id: {value!r}") from exc
        return cls(year, month, day, antenna, component, monitor_point)


@dataclass(frozen=True)
class Metadata:
    """Document level fields shared by every sample of a document."""

    document_id: DocumentID
    property: str
    location: str
    serial_number: str
    index: int
    sample_time: int = 1

    def to_document(self) -> dict:
        """Return the ``metadata`` sub-document stored with the skeleton."""
        doc_id = self.document_id
        return {
            "date": doc_id.date_string,
            "antenna": doc_id.antenna,
            "component": doc_id.component,
            "property": self.property,
            "monitorPoint": doc_id.monitor_point,
            "location": self.location,
            "serialNumber": self.serial_number,
            "index": self.index,
            "sampleTime": self.sample_time,
        }


@dataclass(frozen=True)
class Sample:
    """A single timestamped reading of a monitor point."""

    metadata: Metadata
    hour: int
    minute: int
    second: int
    value: str

    def __post_init__(self):
        if not (0 <= self.hour < 24 and 0 <= self.minute < 60 and 0 <= self.second < 60):
            raise ValueError(
                f"Invalid sample time {self.hour}:{self.minute}:{self.second}"
            )

    @property
    def document_id(self) -> DocumentID:
        return self.metadata.document_id

    @property
    def field_path(self) -> str:
        """Dotted path of the leaf this sample overwrites."""
        return f"hourly.{self.hour}.{self.minute}.{self.second}"
