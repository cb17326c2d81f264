"""Monitor point ingestion into one document per monitor point per day."""

__version__ = "1.0"
