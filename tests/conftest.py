from pathlib import Path

import pytest

from src.adapters.clock import FixedClock
from src.adapters.memory_store import InMemoryContentItemRepo, InMemoryEventStore
from src.components.analytics import ContentItem
from src.rules.loader import load_rules
from src.rules.models import Rules
from tests.factories import NOW, OWNER

PROJECT_ROOT = Path(__file__).resolve().parent.parent


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(NOW)


@pytest.fixture
def store() -> InMemoryEventStore:
    return InMemoryEventStore()


@pytest.fixture
def items() -> InMemoryContentItemRepo:
    return InMemoryContentItemRepo(
        [
            ContentItem(id="ep-1", title="Episode One", owner_id=OWNER),
            ContentItem(id="ep-2", title="Episode Two", owner_id=OWNER),
            ContentItem(id="other", title="Someone Else", owner_id="owner-2"),
        ]
    )


@pytest.fixture
def rules() -> Rules:
    """Real rules from the project root."""
    return load_rules(PROJECT_ROOT / "rules.yaml")
