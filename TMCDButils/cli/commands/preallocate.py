#!/usr/bin/env python3
"""Insert one skeleton document ahead of ingestion."""

import sys
from datetime import date, time

from ..utils import backend_for_settings, settings_from_args
from ...exceptions import TMCDBError
from ...model import DocumentID, Metadata
from ...router import CollectionRouter
from ...skeleton import from_time, skeleton_for


def register(subparsers):
    p = subparsers.add_parser(
        'preallocate',
        help='Insert the skeleton document of one monitor point for one day',
        description='Preallocate a full-day or partial-day skeleton document.'
    )
    p.add_argument('--antenna', required=True)
    p.add_argument('--component', required=True)
    p.add_argument('--monitor-point', required=True)
    p.add_argument('--date', required=True, type=date.fromisoformat, help='Day as YYYY-MM-DD')
    p.add_argument('--property', default='')
    p.add_argument('--location', default='')
    p.add_argument('--serial-number', default='')
    p.add_argument('--index', type=int, default=0)
    p.add_argument('--size', type=int, default=2, help='Expected value length')
    p.add_argument('--sample-time', type=int, default=1, help='Seconds between samples')
    p.add_argument('--start', type=time.fromisoformat,
                   help='Start time HH:MM:SS (default: whole day)')
    p.set_defaults(func=do_preallocate)


def do_preallocate(args):
    try:
        settings = settings_from_args(args)
        document_id = DocumentID(
            args.date.year, args.date.month, args.date.day,
            args.antenna, args.component, args.monitor_point,
        )
        metadata = Metadata(
            document_id, args.property, args.location, args.serial_number,
            args.index, args.sample_time,
        )
        if args.start is not None or args.sample_time != 1:
            skeleton = from_time(metadata, args.start or time(0, 0, 0), args.size)
        else:
            skeleton = skeleton_for(metadata, args.size)
    except (TMCDBError, ValueError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    backend = backend_for_settings(settings)
    if backend is None:
        return 1
    try:
        collection = CollectionRouter(backend, shard=settings.shard_collections).resolve(document_id)
        inserted = backend.insert_document(collection, skeleton)
    except TMCDBError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    finally:
        backend.close()

    if inserted:
        print(f"Preallocated {document_id}")
    else:
        print(f"Document already exists: {document_id}")
    return 0
