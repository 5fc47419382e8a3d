from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING, Any

from dotenv import load_dotenv
from pydantic import ValidationError

from bundlemint.adapters.bundle_json import BundleFormatError
from bundlemint.adapters.generators import SequentialIdentifierGenerator
from bundlemint.app import import_bundle
from bundlemint.config import ConfigurationError, configure_logging
from bundlemint.domain.importing import BundleImportError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from bundlemint.app import GeneratorFactory

log = logging.getLogger(__name__)

EXIT_USAGE = 2
EXIT_FAILURE = 1


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Internalize transaction bundles into a server's identifier space"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    import_parser = subparsers.add_parser("import", help="Internalize a JSON bundle")
    import_parser.add_argument(
        "bundle",
        type=str,
        help="Path to the JSON bundle ('-' reads from stdin)",
    )
    import_parser.add_argument(
        "--output",
        "-o",
        type=str,
        help="Where to write the internalized bundle (defaults to stdout)",
    )
    import_parser.add_argument(
        "--base-url",
        type=str,
        help="Base URL of this server (defaults to BUNDLEMINT_BASE_URL)",
    )
    import_parser.add_argument(
        "--in-memory-ids",
        action="store_true",
        help="Mint identifiers from in-memory counters instead of the database (dry run)",
    )
    import_parser.add_argument(
        "--indent",
        type=int,
        default=2,
        help="JSON indentation of the output (default: %(default)s)",
    )
    return parser.parse_args(list(argv))


def _load_bundle(source: str) -> dict[str, Any]:
    try:
        if source == "-":
            data = json.load(sys.stdin)
        else:
            with Path(source).open(encoding="utf-8") as handle:
                data = json.load(handle)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Bundle is not valid JSON: {exc}") from exc
    except OSError as exc:
        raise ValueError(f"Cannot read bundle {source}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError("Bundle must be a JSON object")  # noqa: TRY004
    return data


def _write_bundle(bundle: dict[str, Any], *, output: str | None, indent: int) -> None:
    rendered = json.dumps(bundle, indent=indent, ensure_ascii=False)
    if output is None or output == "-":
        sys.stdout.write(rendered + "\n")
        return
    Path(output).write_text(rendered + "\n", encoding="utf-8")


def _generator_factory(args: argparse.Namespace) -> GeneratorFactory | None:
    if args.in_memory_ids:
        return SequentialIdentifierGenerator
    return None


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        bundle = _load_bundle(parsed_args.bundle)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(EXIT_USAGE)

    try:
        result = import_bundle(
            bundle,
            base_url=parsed_args.base_url,
            generator_factory=_generator_factory(parsed_args),
        )
        _write_bundle(result.bundle, output=parsed_args.output, indent=parsed_args.indent)
    except BundleImportError as exc:
        log.error("Bundle rejected (%s): %s", int(exc.status_code), exc)  # noqa: TRY400
        sys.exit(EXIT_FAILURE)
    except (ValidationError, BundleFormatError, ConfigurationError) as exc:
        log.error("Invalid bundle or configuration: %s", exc)  # noqa: TRY400
        sys.exit(EXIT_USAGE)
    except Exception:
        log.exception("Fatal error during import")
        sys.exit(EXIT_FAILURE)

    log.info(
        "Bundle imported: references=%s, rewritten=%s, external=%s, unparseable_narratives=%s",
        result.report.visited,
        result.report.rewritten,
        result.report.external,
        len(result.report.unparseable_narratives),
    )


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
