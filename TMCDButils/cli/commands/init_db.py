#!/usr/bin/env python3
"""Verify database connectivity and provision a monthly partition."""

import sys
from datetime import datetime, timezone

from ..utils import backend_for_settings, settings_from_args
from ...exceptions import TMCDBError
from ...router import CollectionRouter, collection_name


def register(subparsers):
    p = subparsers.add_parser(
        'init-db',
        help='Verify DB connection and provision a monthly collection',
        description='Create the index (and shard key) of a monthly monitorData collection.'
    )
    p.add_argument('--year', type=int, help='Partition year (default: current UTC year)')
    p.add_argument('--month', type=int, help='Partition month 1-12 (default: current UTC month)')
    p.set_defaults(func=do_init)


def do_init(args):
    now = datetime.now(timezone.utc)
    year = args.year or now.year
    month = args.month or now.month
    if not 1 <= month <= 12:
        print(f"ERROR: Invalid month: {month}", file=sys.stderr)
        return 1

    try:
        settings = settings_from_args(args)
    except TMCDBError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    backend = backend_for_settings(settings)
    if backend is None:
        return 1

    try:
        router = CollectionRouter(backend, shard=settings.shard_collections)
        router.resolve_partition(month, year)
    except TMCDBError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    finally:
        backend.close()

    print(f"Partition ready: {collection_name(month, year)}")
    print("Database connection OK")
    return 0
