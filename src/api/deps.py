import os
from functools import lru_cache
from pathlib import Path
from typing import Annotated

from fastapi import Depends, Header, HTTPException, status

from src.adapters.ai_gateway import HttpCompletionGateway
from src.adapters.clock import SystemClock
from src.adapters.rules_adapter import AnalyticsRulesAdapter
from src.adapters.sqlite_db import SQLiteContentItemRepo, SQLiteEventStore
from src.components.analytics import ContentItemPort, EventStorePort, TimePort
from src.components.writing import CompletionPort
from src.rules.loader import load_rules
from src.rules.models import Rules


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.data_dir = Path(os.environ.get("BLOGCAST_DATA_DIR", "./data"))
        self.db_path = str(self.data_dir / "blogcast.db")
        self.migrations_dir = str(self.base_dir / "migrations")
        self.rules_path = Path(os.environ.get("BLOGCAST_RULES_PATH", self.base_dir / "rules.yaml"))


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
@lru_cache
def get_rules(settings: Settings = Depends(get_settings)) -> Rules:
    return load_rules(settings.rules_path)


def get_analytics_rules(rules: Rules = Depends(get_rules)) -> AnalyticsRulesAdapter:
    return AnalyticsRulesAdapter(rules.analytics)


# --- Ports ---
def get_event_store(settings: Settings = Depends(get_settings)) -> EventStorePort:
    return SQLiteEventStore(settings.db_path)


def get_content_items(settings: Settings = Depends(get_settings)) -> ContentItemPort:
    return SQLiteContentItemRepo(settings.db_path)


def get_time_port() -> TimePort:
    return SystemClock()


def get_completion(rules: Rules = Depends(get_rules)) -> CompletionPort:
    return HttpCompletionGateway.from_rules(rules.writing)


# --- Caller identity ---
# Authentication happens upstream in the hosted auth service; it forwards the
# verified user id in this header.
def get_owner_id(
    x_user_id: Annotated[str | None, Header()] = None,
) -> str:
    if not x_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return x_user_id
