#!/usr/bin/env python3
"""Ingest legacy monitor records read as JSON lines."""

import json
import sys

from ..utils import backend_for_settings, settings_from_args
from ...exceptions import TMCDBError
from ...ingest import IngestContext, IngestionPipeline


def register(subparsers):
    p = subparsers.add_parser(
        'ingest',
        help='Ingest JSON-lines legacy monitor records',
        description='Decode legacy monitor records and write them with N concurrent workers.'
    )
    p.add_argument('-f', '--file', help='Input file with one JSON record per line (default: stdin)')
    p.add_argument('-w', '--workers', type=int, help='Number of worker threads')
    p.add_argument('--queue-size', type=int, help='Maximum queued records')
    p.add_argument(
        '--no-preallocate',
        action='store_true',
        help='Skip skeleton preallocation and only upsert fields',
    )
    p.set_defaults(func=do_ingest)


def read_records(stream):
    """Yield one record per non-blank line.

    Lines that are not valid JSON are passed through as text and counted as
    errors by the workers.
    """
    for line in stream:
        line = line.strip()
        if not line:
            continue
        try:
            yield json.loads(line)
        except json.JSONDecodeError:
            yield line


def do_ingest(args):
    overrides = {"num_workers": args.workers, "queue_size": args.queue_size}
    if args.no_preallocate:
        overrides["preallocate"] = False
    try:
        settings = settings_from_args(args, **overrides)
    except TMCDBError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    backend = backend_for_settings(settings)
    if backend is None:
        return 1

    context = IngestContext.create(backend, settings)
    pipeline = IngestionPipeline(
        context,
        num_workers=settings.num_workers,
        queue_size=settings.queue_size,
        poll_interval=settings.poll_interval,
    )

    stream = open(args.file, 'r') if args.file else sys.stdin
    try:
        counts = pipeline.run_records(read_records(stream))
    except KeyboardInterrupt:
        print("Interrupted; queued records were not ingested", file=sys.stderr)
        counts = context.stats.snapshot()
    finally:
        if args.file:
            stream.close()
        backend.close()

    print(f"Updates: {counts['updates']}")
    print(f"Preallocated documents: {counts['preallocations']}")
    print(f"Errors: {counts['errors']}")
    return 0 if counts['errors'] == 0 else 2
