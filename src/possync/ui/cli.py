# ruff: noqa: T201

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from possync.adapters.payload import render_batch_result, render_sync_status
from possync.app import reconcile_offline_batch, sync_status
from possync.config import configure_logging
from possync.domain.reconciliation import BatchShapeError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


class BatchFileError(Exception):
    """The batch file named on the command line cannot be read."""


def _positive_int(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid integer: {value}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError(f"Expected a positive integer, got {value}")
    return parsed


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reconcile offline POS data")
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log per-record decisions",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    upload = subparsers.add_parser("upload", help="Reconcile an offline sync batch")
    upload.add_argument(
        "--tenant-id",
        type=_positive_int,
        required=True,
        help="Tenant the batch belongs to",
    )
    upload.add_argument(
        "file",
        type=Path,
        help="JSON batch exported by the POS client ('-' reads stdin)",
    )

    status = subparsers.add_parser("status", help="Show the tenant's sync status")
    status.add_argument(
        "--tenant-id",
        type=_positive_int,
        required=True,
        help="Tenant to report on",
    )

    return parser.parse_args(list(argv))


def _read_batch(path: Path) -> str:
    if str(path) == "-":
        return sys.stdin.read()
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise BatchFileError(f"Cannot read batch file {path}: {exc}") from exc


def main(argv: Sequence[str] | None = None) -> None:
    """Run one CLI command and print its JSON result to stdout."""
    parsed_args = _parse_args(sys.argv[1:] if argv is None else argv)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        if parsed_args.command == "upload":
            raw_batch = _read_batch(parsed_args.file)
            result = reconcile_offline_batch(raw_batch, tenant_id=parsed_args.tenant_id)
            document = render_batch_result(result)
        elif parsed_args.command == "status":
            document = render_sync_status(sync_status(parsed_args.tenant_id))
        else:
            raise RuntimeError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except (BatchShapeError, BatchFileError):
        log.exception("Rejected input")
        sys.exit(2)
    except Exception:
        log.exception("possync %s failed", parsed_args.command)
        sys.exit(1)

    print(json.dumps(document, ensure_ascii=False, indent=2))


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Exit quietly on Ctrl+C."""
    log.info("Interrupted, exiting")
    sys.exit(0)


def run() -> None:
    """Console script entry point: load ``.env`` and install the SIGINT handler."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
