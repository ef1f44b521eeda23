import os
import sqlite3
from datetime import UTC, datetime, timedelta
from pathlib import Path
from uuid import uuid4

from orienteering.adapters.sqlite.migrator import SQLiteMigrator
from orienteering.rules.loader import load_rules

EVENT_ID = "spring-cup-2024"
RACE_ID = "long"

CLASSES = [
    ("M21E", "Men Elite"),
    ("W21E", "Women Elite"),
    ("M35", "Men 35"),
]

PARTICIPANTS = [
    ("M21E", "Taro Yamada"),
    ("W21E", "Hanako Sato"),
    ("M21E", "Jiro Tanaka"),
    ("M35", "Ken Suzuki"),
    ("W21E", "Yuki Kobayashi"),
    ("M21E", "Shota Ito"),
]


def seed():
    rules = load_rules(Path("rules.yaml"))
    data_dir = os.environ.get("ORIENTEERING_DATA_DIR", "./data")
    os.makedirs(data_dir, exist_ok=True)

    db_path = f"{data_dir}/{rules.storage.database_file}"
    print(f"Seeding to {db_path}")

    SQLiteMigrator(db_path, rules.storage.migrations_dir).run_migrations()

    conn = sqlite3.connect(db_path)
    try:
        conn.executemany(
            "INSERT OR IGNORE INTO entry_classes (event_id, race_id, class_id, name) "
            "VALUES (?, ?, ?, ?)",
            [(EVENT_ID, RACE_ID, class_id, name) for class_id, name in CLASSES],
        )

        submitted = datetime(2024, 4, 1, 9, 0, tzinfo=UTC)
        for i, (class_id, name) in enumerate(PARTICIPANTS):
            conn.execute(
                "INSERT INTO participant_entries "
                "(id, event_id, race_id, entry_class_id, participant_name, "
                "participant_email, submitted_at) VALUES (?, ?, ?, ?, ?, ?, ?)",
                (
                    str(uuid4()),
                    EVENT_ID,
                    RACE_ID,
                    class_id,
                    name,
                    f"runner{i}@example.com",
                    (submitted + timedelta(hours=i)).isoformat(),
                ),
            )
        conn.commit()
    finally:
        conn.close()

    print(f"Seeded {len(CLASSES)} classes and {len(PARTICIPANTS)} entries for {EVENT_ID}/{RACE_ID}")


if __name__ == "__main__":
    seed()
