"""Helpers shared by CLI commands."""

import sys

from ..backends import get_backend
from ..config import load_settings
from ..exceptions import TMCDBError


def settings_from_args(args, **overrides):
    return load_settings(getattr(args, 'config', None), **overrides)


def backend_for_settings(settings):
    """Connect to the configured store, or print why not and return None."""
    if not settings.connection_string:
        print("ERROR: No database connection configured.", file=sys.stderr)
        print("Hint: Set TMCDB_URL environment variable (MongoDB).", file=sys.stderr)
        return None
    try:
        return get_backend(
            settings.connection_string,
            database=settings.database,
            max_pool_size=max(50, settings.num_workers * 2),
        )
    except TMCDBError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return None
