"""
NFS Scoring Engine - CLI.

============================================================
RESPONSIBILITY
============================================================
Command-line interface for the NFS engine.

- Scores a JSON batch file (optionally persisting results)
- Lists stored calculation history for an enterprise
- Shows one stored calculation
- Creates the database tables

============================================================
USAGE
============================================================
nfs-score score batch.json
nfs-score score batch.json --explain --config conf/nfs.yaml
nfs-score score batch.json --persist --database-url sqlite:///nfs.db
nfs-score history ENTERPRISE_ID --page 2 --page-size 10
nfs-score show CALCULATION_ID
nfs-score init-db

============================================================
"""

import argparse
import json
import logging
import sys
from typing import Any, List, Optional

from database import DatabasePersistenceError, configure_engine, initialize_database

from .batch import NfsBatchRunner
from .config import NfsScoringConfig
from .engine import NfsScoringEngine, format_score_summary
from .exceptions import NfsScoringError
from .schemas import load_batch_file
from .service import NfsService


logger = logging.getLogger("nfs_scoring.cli")


# ============================================================
# CLI ARGUMENT PARSER
# ============================================================

def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="nfs-score",
        description="Net Financing Space (NFS) scoring engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s score batch.json                 # Score and print JSON results
  %(prog)s score batch.json --format text   # Human-readable summaries
  %(prog)s score batch.json --persist       # Check enterprises and store results
  %(prog)s history ent-001 --page 1         # Stored history for an enterprise
        """
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version="%(prog)s 1.0.0",
    )

    # --------------------------------------------------------
    # Logging Options
    # --------------------------------------------------------
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="WARNING",
        help="Logging level (default: WARNING)",
    )

    parser.add_argument(
        "--database-url",
        type=str,
        metavar="URL",
        help="Database URL (default: DATABASE_URL from environment)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # --------------------------------------------------------
    # score
    # --------------------------------------------------------
    score_parser = subparsers.add_parser("score", help="Score a JSON batch file")
    score_parser.add_argument("input", metavar="FILE", help="JSON batch file")
    score_parser.add_argument(
        "--config",
        type=str,
        metavar="PATH",
        help="YAML scoring configuration",
    )
    score_parser.add_argument(
        "--format",
        type=str,
        choices=["json", "text"],
        default="json",
        help="Output format (default: json)",
    )
    score_parser.add_argument(
        "--explain",
        action="store_true",
        help="Include per-component breakdown (json format only)",
    )
    score_parser.add_argument(
        "--persist",
        action="store_true",
        help="Check enterprises exist and store each result",
    )
    score_parser.add_argument(
        "--output", "-o",
        type=str,
        metavar="PATH",
        help="Write output to a file instead of stdout",
    )

    # --------------------------------------------------------
    # history / show / init-db
    # --------------------------------------------------------
    history_parser = subparsers.add_parser("history", help="List stored calculations")
    history_parser.add_argument("enterprise_id", metavar="ENTERPRISE_ID")
    history_parser.add_argument("--page", type=int, default=1)
    history_parser.add_argument("--page-size", type=int, default=20)

    show_parser = subparsers.add_parser("show", help="Show one stored calculation")
    show_parser.add_argument("calculation_id", metavar="CALCULATION_ID")

    subparsers.add_parser("init-db", help="Create database tables")

    return parser


# ============================================================
# COMMANDS
# ============================================================

def _load_config(path: Optional[str]) -> NfsScoringConfig:
    if path:
        return NfsScoringConfig.from_env(NfsScoringConfig.from_yaml(path))
    return NfsScoringConfig.from_env()


def _build_service(args: argparse.Namespace, engine: Optional[NfsScoringEngine] = None):
    db_engine = configure_engine(args.database_url)
    initialize_database(db_engine)
    return NfsService(engine=engine)


def _emit(text: str, output: Optional[str]) -> None:
    if output:
        with open(output, "w", encoding="utf-8") as f:
            f.write(text + "\n")
    else:
        print(text)


def cmd_score(args: argparse.Namespace) -> int:
    engine = NfsScoringEngine(config=_load_config(args.config))
    requests = load_batch_file(args.input)

    if args.persist:
        results = _build_service(args, engine).calculate_batch(requests)
    else:
        results = NfsBatchRunner(engine=engine).run(requests)

    if args.format == "text":
        text = "\n".join(format_score_summary(r) for r in results)
    else:
        payload: List[Any] = []
        for request, result in zip(requests, results):
            if args.explain and result.succeeded:
                item = engine.assess(request).to_dict()
                item["id"] = result.calculation_id or ""
                item["createdAt"] = result.created_at.isoformat() if result.created_at else None
                payload.append(item)
            else:
                payload.append(result.to_dict())
        text = json.dumps(payload, indent=2, ensure_ascii=False)

    _emit(text, args.output)

    failed = sum(1 for r in results if not r.succeeded)
    if failed:
        logger.warning(f"{failed} of {len(results)} calculations failed")
    return 0


def cmd_history(args: argparse.Namespace) -> int:
    history = _build_service(args).get_history(args.enterprise_id, args.page, args.page_size)
    print(json.dumps(history.to_dict(), indent=2, ensure_ascii=False, default=str))
    return 0


def cmd_show(args: argparse.Namespace) -> int:
    result = _build_service(args).get_result(args.calculation_id)
    print(json.dumps(result, indent=2, ensure_ascii=False, default=str))
    return 0


def cmd_init_db(args: argparse.Namespace) -> int:
    _build_service(args)
    print("Database initialized")
    return 0


COMMANDS = {
    "score": cmd_score,
    "history": cmd_history,
    "show": cmd_show,
    "init-db": cmd_init_db,
}


# ============================================================
# ENTRY POINT
# ============================================================

def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    try:
        return COMMANDS[args.command](args)
    except (NfsScoringError, DatabasePersistenceError) as e:
        logger.error(str(e))
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
