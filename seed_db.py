import os
import random
import sys
from datetime import timedelta

# Add root to pythonpath
sys.path.append(os.getcwd())

from src.adapters.clock import SystemClock
from src.adapters.sqlite.migrator import SQLiteMigrator
from src.adapters.sqlite_db import SQLiteContentItemRepo, SQLiteEventStore
from src.components.analytics import ContentItem, EventType, PlaybackEvent

EPISODES = [
    ("ep-001", "Pilot: Why We Started"),
    ("ep-002", "Interview Craft"),
    ("ep-003", "Editing on a Budget"),
    ("ep-004", "Growing Your Audience"),
]
COUNTRIES = ["US", "GB", "DE", "CA", "AU", "IN", "FR", None]
DEVICES = ["mobile", "desktop", "tablet", "smart_speaker", None]


def seed(owner_id: str = "demo-user", days: int = 90, seed_value: int = 42) -> None:
    data_dir = os.environ.get("BLOGCAST_DATA_DIR", "./data")
    os.makedirs(data_dir, exist_ok=True)

    db_path = f"{data_dir}/blogcast.db"
    print(f"Seeding to {db_path}")

    SQLiteMigrator(db_path, "migrations").run_migrations()

    items = SQLiteContentItemRepo(db_path)
    store = SQLiteEventStore(db_path)
    rng = random.Random(seed_value)
    now = SystemClock().now_utc()

    for position, (item_id, title) in enumerate(EPISODES):
        items.save(ContentItem(id=item_id, title=title, owner_id=owner_id), position=position)

    count = 0
    for day in range(days):
        for item_id, _ in EPISODES:
            for _ in range(rng.randint(0, 6)):
                session_id = f"sess-{rng.getrandbits(40):010x}"
                ts = now - timedelta(days=day, seconds=rng.randint(0, 86_399))
                country = rng.choice(COUNTRIES)
                device = rng.choice(DEVICES)
                listened = rng.choice([15, 45, 120, 400, 1200, None])

                store.add(
                    PlaybackEvent(
                        content_item_id=item_id,
                        event_type=EventType.PLAY,
                        timestamp=ts,
                        session_id=session_id,
                        listen_duration_seconds=listened,
                        country=country,
                        device_type=device,
                    )
                )
                count += 1

                if listened is not None and listened >= 400:
                    store.add(
                        PlaybackEvent(
                            content_item_id=item_id,
                            event_type=EventType.COMPLETE,
                            timestamp=ts + timedelta(seconds=listened),
                            session_id=session_id,
                            country=country,
                            device_type=device,
                        )
                    )
                    count += 1

                extra = rng.random()
                if extra < 0.05:
                    event_type = EventType.SHARE
                elif extra < 0.12:
                    event_type = EventType.DOWNLOAD
                else:
                    continue
                store.add(
                    PlaybackEvent(
                        content_item_id=item_id,
                        event_type=event_type,
                        timestamp=ts,
                        session_id=session_id,
                        country=country,
                        device_type=device,
                    )
                )
                count += 1

    print(f"Seeded {len(EPISODES)} episodes and {count} events for {owner_id}")


if __name__ == "__main__":
    seed(*sys.argv[1:2])
