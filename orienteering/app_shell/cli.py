import argparse
import logging
import sys
from pathlib import Path

from orienteering.adapters.sqlite.migrator import SQLiteMigrator
from orienteering.adapters.sqlite.repos import (
    SQLiteEntryClassQuery,
    SQLiteParticipantEntryQuery,
    SQLiteStartListRepo,
)
from orienteering.app_shell.config import configure_logging
from orienteering.components.start_list import (
    FinalizeStartListInput,
    GetStartListInput,
    ScheduleParticipantsInput,
    StartListOutput,
    StartListService,
    run_finalize,
    run_get,
    run_schedule_participants,
)
from orienteering.domain.entities import StartListDraft
from orienteering.rules.loader import load_rules
from orienteering.rules.models import Rules

logger = logging.getLogger("cli")

RULES_PATH = "rules.yaml"
DATA_DIR = "data"


def get_rules(rules_path: Path) -> Rules:
    if not rules_path.exists():
        logger.error("Rules file %s not found.", rules_path)
        sys.exit(1)
    return load_rules(rules_path)


def get_service(db_path: str) -> StartListService:
    return StartListService(
        repo=SQLiteStartListRepo(db_path),
        entry_classes=SQLiteEntryClassQuery(db_path),
        participants=SQLiteParticipantEntryQuery(db_path),
    )


def format_start_list(draft: StartListDraft) -> str:
    settings = draft.settings
    lines = [
        f"{draft.event_id} / {draft.race_id} [{draft.status}]",
        f"Start {settings.start_at.isoformat()}, every {settings.interval_seconds}s, "
        f"{settings.lane_count} lane(s)",
    ]
    for lane in sorted(draft.lane_assignments, key=lambda a: a.lane_number):
        lines.append(f"  Lane {lane.lane_number}: {lane.entry_class_id}")
    for slot in sorted(draft.participant_slots, key=lambda s: s.sequence):
        lines.append(
            f"  #{slot.sequence:<4} {slot.start_time.strftime('%H:%M:%S')}  "
            f"lane {slot.lane_number}  {slot.participant_name} ({slot.entry_class_id})"
        )
    return "\n".join(lines)


def report(output: StartListOutput) -> int:
    if not output.success or output.draft is None:
        for error in output.errors:
            logger.error("%s: %s", error.code, error.message)
        return 1
    print(format_start_list(output.draft))
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Orienteering start list CLI")
    parser.add_argument("--rules", default=RULES_PATH, help="Path to rules.yaml")
    parser.add_argument("--data-dir", default=DATA_DIR, help="Directory holding the database")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("migrate", help="Apply pending database migrations")

    for name, help_text in (
        ("show", "Print a race's start list"),
        ("schedule", "Schedule registered participants"),
        ("finalize", "Publish a race's start list"),
    ):
        race_parser = subparsers.add_parser(name, help=help_text)
        race_parser.add_argument("event_id")
        race_parser.add_argument("race_id")

    args = parser.parse_args(argv)

    rules = get_rules(Path(args.rules))
    configure_logging(rules)

    data_dir = Path(args.data_dir)
    data_dir.mkdir(parents=True, exist_ok=True)
    db_path = str(data_dir / rules.storage.database_file)

    if args.command == "migrate":
        applied = SQLiteMigrator(db_path, rules.storage.migrations_dir).run_migrations()
        print(f"Applied {len(applied)} migration(s).")
        return 0

    service = get_service(db_path)
    if args.command == "show":
        return report(run_get(GetStartListInput(args.event_id, args.race_id), service))
    elif args.command == "schedule":
        inp = ScheduleParticipantsInput(args.event_id, args.race_id)
        return report(run_schedule_participants(inp, service))
    elif args.command == "finalize":
        inp_finalize = FinalizeStartListInput(args.event_id, args.race_id)
        return report(run_finalize(inp_finalize, service))

    return 2


if __name__ == "__main__":
    sys.exit(main())
