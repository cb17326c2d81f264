#!/usr/bin/env python3
import argparse
import importlib
import logging
import pkgutil
import sys


def _generate_command_help(subparsers):
    """Auto-generate command list from registered subparsers."""
    commands = []
    for name in sorted(subparsers.choices.keys()):
        parser = subparsers.choices[name]
        help_text = parser.description or ''
        commands.append(f"  {name:<20} {help_text}")

    lines = ["Available commands:", ""]
    lines.extend(commands)
    return "\n".join(lines)


def build_parser():
    parser = argparse.ArgumentParser(
        prog="tmcdb",
        description="Ingest monitor data into one document per monitor point per day",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument('-c', '--config', help='YAML settings file')
    parser.add_argument(
        '--log-level',
        default='INFO',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Logging verbosity (default: INFO)',
    )

    subs = parser.add_subparsers(dest='cmd')

    # Dynamically import every module in cli/commands and call its register()
    pkg = importlib.import_module('TMCDButils.cli.commands')
    for finder, name, ispkg in pkgutil.iter_modules(pkg.__path__):
        mod = importlib.import_module(f"TMCDButils.cli.commands.{name}")
        if hasattr(mod, 'register'):
            mod.register(subs)

    command_help = _generate_command_help(subs)
    parser.epilog = f"""
{command_help}

DATABASE CONNECTION:
Use TMCDB_URL environment variable or connection_string in the config file:
  export TMCDB_URL=mongodb://host:port/OneMonitorPointPerDayPerDocument

For detailed help: tmcdb <command> --help
"""
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.cmd:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s [%(threadName)s] %(name)s: %(message)s",
    )

    # every module must set args.func to its handler in register()
    return args.func(args)


if __name__ == '__main__':
    sys.exit(main())
