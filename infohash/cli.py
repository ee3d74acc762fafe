import argparse
import dataclasses
import importlib
import logging
import sys
from pathlib import Path

from infohash.codec import Fingerprint
from infohash.config import get_lock_path
from infohash.errors import InfohashError, SchemaChangedError
from infohash.log import clickable_path, configure_logging
from infohash.schema import RecordSchema
from infohash.schema_lock import load_schema_lock, save_schema_lock

logger = logging.getLogger(__name__)


def add_app_dir(app_dir: str | Path) -> None:
    """Make modules under ``app_dir`` importable, as when run from there."""
    resolved = str(Path(app_dir).resolve())
    if resolved not in sys.path:
        sys.path.insert(0, resolved)


def resolve_schema(target: str) -> RecordSchema:
    """Resolve ``module:attribute`` to a RecordSchema.

    The attribute may be a RecordSchema or a dataclass with infohash tags.
    Modules are imported from ``sys.path``; see ``add_app_dir``.
    """
    module_name, sep, attr_path = target.partition(":")
    if not sep or not module_name or not attr_path:
        raise InfohashError(f"Target must look like 'module:attribute', got '{target}'")

    try:
        obj = importlib.import_module(module_name)
    except ImportError as e:
        raise InfohashError(f"Cannot import module '{module_name}': {e}") from e

    for part in attr_path.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as e:
            raise InfohashError(f"'{target}' does not exist") from e

    if isinstance(obj, RecordSchema):
        return obj
    if isinstance(obj, type) and dataclasses.is_dataclass(obj):
        return RecordSchema.from_dataclass(obj)
    raise InfohashError(
        f"'{target}' is neither a RecordSchema nor a dataclass "
        f"(got {type(obj).__name__})"
    )


def _lock_path(args) -> Path:
    return Path(args.file) if args.file else get_lock_path()


def run_decode(args):
    """Show the contents of a hex-encoded fingerprint."""
    fingerprint = Fingerprint.from_hex(args.fingerprint)
    logger.info(f"Full checksum: {fingerprint.full:016x}")
    logger.info(f"Parity words:  {len(fingerprint.parity)}")
    for bit, word in enumerate(fingerprint.parity):
        logger.info(f"  [{bit}] {word:08x}")
    logger.info(f"Addresses up to {fingerprint.field_capacity} fields")


def run_lock(args):
    """Pin the current field layout of each target in the lock file."""
    path = _lock_path(args)
    lock = load_schema_lock(path)
    add_app_dir(args.app_dir)
    for target in args.targets:
        schema = resolve_schema(target)
        lock = lock.record(target, schema)
        logger.info(f"Locked {target} ({len(schema)} fields, {schema.hexdigest()})")
    save_schema_lock(path, lock)
    logger.info(f"Lock file written: {clickable_path(path)}")


def run_check(args):
    """Check each target against the lock file; exit 1 on any change."""
    path = _lock_path(args)
    lock = load_schema_lock(path)
    add_app_dir(args.app_dir)
    failures = 0
    for target in args.targets:
        schema = resolve_schema(target)
        try:
            lock.check(target, schema)
        except SchemaChangedError as e:
            logger.error(str(e))
            failures += 1
            continue
        logger.info(f"{target}: OK")

    if failures:
        logger.error(f"{failures} schema(s) changed since {clickable_path(path)}")
        raise SystemExit(1)


def _add_target_arguments(parser):
    parser.add_argument(
        "--file",
        "-f",
        default=None,
        help="Lock file path (default: $INFOHASH_LOCK_FILE or ./infohash.lock.yaml)",
    )
    parser.add_argument(
        "--app-dir",
        default=".",
        help="Directory to import TARGET modules from (default: current directory)",
    )


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="infohash",
        description="Inspect record fingerprints and lock record schemas",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=False)

    decode_parser = subparsers.add_parser(
        "decode",
        help="Show full checksum and parity words of a fingerprint",
    )
    decode_parser.add_argument(
        "fingerprint",
        metavar="HEX",
        help="Fingerprint as hexadecimal text",
    )
    decode_parser.set_defaults(handler=run_decode)

    lock_parser = subparsers.add_parser(
        "lock",
        help="Record the current schema digests in the lock file",
    )
    lock_parser.add_argument(
        "targets",
        metavar="TARGET",
        nargs="+",
        help="Schema as module:attribute",
    )
    _add_target_arguments(lock_parser)
    lock_parser.set_defaults(handler=run_lock)

    check_parser = subparsers.add_parser(
        "check",
        help="Fail if any schema differs from the lock file",
    )
    check_parser.add_argument(
        "targets",
        metavar="TARGET",
        nargs="+",
        help="Schema as module:attribute",
    )
    _add_target_arguments(check_parser)
    check_parser.set_defaults(handler=run_check)

    args = parser.parse_args(argv)

    log_level = logging.DEBUG if args.debug else logging.INFO
    configure_logging(stream_level=log_level)

    if not hasattr(args, "handler"):
        print("infohash – change-localizing record fingerprints")
        print()
        print("Available commands:")
        print("  decode HEX         Show the contents of a stored fingerprint")
        print("  lock TARGET...     Pin schema digests in infohash.lock.yaml")
        print("  check TARGET...    Fail if a schema changed since it was locked")
        print()
        print("  infohash <command> --help   Show help for a specific command")
        return

    try:
        args.handler(args)
    except InfohashError as e:
        logger.error(str(e))
        raise SystemExit(1)


if __name__ == "__main__":
    main()
