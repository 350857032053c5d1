from __future__ import annotations

import argparse
import codecs
import json
import sys
from pathlib import Path

from dotenv import load_dotenv


def _ensure_backend_on_path() -> None:
    backend_dir = Path(__file__).resolve().parents[1]
    if str(backend_dir) not in sys.path:
        sys.path.insert(0, str(backend_dir))


def _load_json(path: Path):
    with path.open(encoding="utf-8") as handle:
        return json.load(handle)


def _default_output(statement_path: Path, suffix: str) -> Path:
    return statement_path.with_name(f"{statement_path.stem}{suffix}")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Reconcile a statement payload and write MT940 and DATEV booking batch files."
    )
    parser.add_argument("statement", help="Path to the statement payload JSON.")
    parser.add_argument(
        "--profile",
        default=None,
        help="Export profile JSON (CSV dialect, column widths, DATEV account settings).",
    )
    parser.add_argument(
        "--mt940-out",
        default=None,
        help="MT940 output path (defaults to <statement>.sta next to the input).",
    )
    parser.add_argument(
        "--datev-out",
        default=None,
        help="DATEV output path (defaults to <statement>_datev.csv next to the input).",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level (defaults to INTERCHANGE_LOG_LEVEL, then INFO).",
    )
    args = parser.parse_args(argv)

    _ensure_backend_on_path()
    from adapters.datev import booking_batch_from_statement
    from adapters.statement_payload import statement_from_payload
    from common.interchange.config import ExportProfile
    from common.interchange.exceptions import InterchangeError
    from common.interchange.logging_setup import configure_logging, get_logger

    # INTERCHANGE_LOG_LEVEL may come from a .env file.
    load_dotenv()
    configure_logging(args.log_level)
    logger = get_logger("scripts.export_statement")

    statement_path = Path(args.statement).resolve()
    profile = ExportProfile()
    if args.profile:
        profile = ExportProfile.model_validate(_load_json(Path(args.profile)))

    try:
        statement = statement_from_payload(_load_json(statement_path))
        datev = booking_batch_from_statement(
            statement,
            profile.datev,
            column_widths=profile.column_widths,
            dialect=profile.dialect,
        )
    except InterchangeError as exc:
        logger.error("export_failed", **exc.to_dict())
        return 1
    except ValueError as exc:
        # Malformed payloads and pydantic validation errors.
        logger.error("export_failed", error=str(exc))
        return 1

    # Check the DATEV encoding before either file is written.
    try:
        codecs.lookup(datev.encoding)
    except LookupError:
        logger.error("export_failed", error=f"Unknown encoding: {datev.encoding!r}")
        return 1

    mt940_out = Path(args.mt940_out) if args.mt940_out else _default_output(statement_path, ".sta")
    datev_out = Path(args.datev_out) if args.datev_out else _default_output(statement_path, "_datev.csv")

    # Line terminators are part of the rendered text.
    mt940_out.write_text(statement.to_mt940(), encoding="latin-1", errors="replace", newline="")
    datev_out.write_text(
        datev.to_string() + datev.line_terminator,
        encoding=datev.encoding,
        errors="replace",
        newline="",
    )

    logger.info(
        "export_written",
        account_id=statement.account_id,
        transactions=len(statement.transactions),
        mt940=str(mt940_out),
        datev=str(datev_out),
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
