"""
Event Replay Script.

============================================================
REPLAY DECODED LOGS INTO THE ENTITY STORE
============================================================

Reads a JSON-lines file where each line is one decoded log in
web3 shape ({"event", "args", "blockNumber", "transactionHash",
"logIndex"}), in chain order, and applies it to the configured
database (DATABASE_URL), one transaction per event.

Lines that cannot be decoded are logged and skipped. After the
replay the governance aggregates are audited against the tables.

USAGE:
    python scripts/replay_events.py logs.jsonl
    python scripts/replay_events.py logs.jsonl --dry-run

EXIT CODES:
- 0: Replay finished, audit clean
- 1: Input file missing
- 2: Replay finished, audit found mismatches

============================================================
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Iterator

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from core.config import IndexerConfig  # noqa: E402
from core.constants import SYSTEM_NAME, SYSTEM_VERSION  # noqa: E402
from core.exceptions import EventDecodeError  # noqa: E402
from indexer import EventDispatcher, GovernanceAuditor, GovernanceIndexer, decode_event  # noqa: E402
from indexer.events import GovernanceEvent  # noqa: E402
from storage import create_database_engine, get_session_factory, initialize_database  # noqa: E402
from storage.repositories import InMemoryEntityStore, SqlAlchemyEntityStore  # noqa: E402

logger = logging.getLogger("replay_events")


def read_events(path: Path) -> Iterator[GovernanceEvent]:
    """Decode each line of a JSON-lines log file, skipping bad lines."""
    with path.open("r", encoding="utf-8") as handle:
        for line_number, line in enumerate(handle, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                yield decode_event(json.loads(line))
            except json.JSONDecodeError as e:
                logger.warning(f"Line {line_number}: not JSON ({e}); skipping")
            except EventDecodeError as e:
                logger.warning(f"Line {line_number}: {e.to_log_format()}; skipping")


def main() -> int:
    parser = argparse.ArgumentParser(description="Replay decoded governance logs")
    parser.add_argument("path", type=Path, help="JSON-lines file of decoded logs")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="apply to an in-memory store instead of DATABASE_URL",
    )
    args = parser.parse_args()

    config = IndexerConfig.from_env()
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    logger.info(f"{SYSTEM_NAME} v{SYSTEM_VERSION} replaying {args.path}")

    if not args.path.exists():
        logger.error(f"Input file not found: {args.path}")
        return 1

    if args.dry_run:
        dispatcher = EventDispatcher(
            token_decimals=config.token_decimals,
            record_receipts=config.record_event_receipts,
        )
        store = InMemoryEntityStore()
        applied = sum(1 for event in read_events(args.path) if dispatcher.dispatch(event, store))
        logger.info(f"Dry run applied {applied} events")
        report = GovernanceAuditor(store).run()
    else:
        engine = create_database_engine(config)
        initialize_database(engine)
        session_factory = get_session_factory(engine)

        indexer = GovernanceIndexer.from_config(session_factory, config)
        stats = indexer.process_all(read_events(args.path))
        logger.info(f"Replay stats: {stats.to_dict()}")

        with session_factory() as session:
            report = GovernanceAuditor(SqlAlchemyEntityStore(session)).run()

    for mismatch in report.mismatches:
        logger.error(f"  [!!] {mismatch.mismatch_type.value} {mismatch.entity_id or ''} "
                     f"expected={mismatch.expected_value} actual={mismatch.actual_value}")

    return 0 if report.is_consistent else 2


if __name__ == "__main__":
    sys.exit(main())
