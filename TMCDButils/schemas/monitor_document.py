"""Monitor point day document schema definition."""

COLLECTION_PREFIX = "monitorData"

MONITOR_DOCUMENT_SCHEMA = {
    "_id": str,
    "metadata": {
        "date": str,
        "antenna": str,
        "component": str,
        "property": str,
        "monitorPoint": str,
        "location": str,
        "serialNumber": str,
        "index": int,
        "sampleTime": int,
    },
    # hourly.<hour>.<minute>.<second> -> value
    "hourly": {},
}

MONITOR_INDEX_NAME = "dateMonitorPointAntennaComponent"

MONITOR_INDEXES = [
    ("metadata.date", 1),
    ("metadata.antenna", 1),
    ("metadata.component", 1),
    ("metadata.monitorPoint", 1),
]

MONITOR_SHARD_KEY = [
    ("metadata.date", 1),
    ("metadata.antenna", 1),
]
