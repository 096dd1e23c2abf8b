"""Shared fakes for the migration tests."""
import threading
from typing import Any, Dict, Iterable, List, Optional

import pytest

from schoolsync.errors import ConfigurationError, HygraphError
from schoolsync.extractors.base import BaseExtractor, ExtractionResult
from schoolsync.loaders.base import BaseLoader
from schoolsync.models.hygraph import AppUser
from schoolsync.models.migration import MigrationConfig
from schoolsync.services.checkpoint import CheckpointStore
from schoolsync.services.throttle import ConcurrencyController


class FakeExtractor(BaseExtractor):
    """In-memory source collection."""

    def __init__(self, documents: Iterable[Dict[str, Any]], collection: str = "students", fail: bool = False):
        super().__init__(collection, service="fake")
        self.documents = list(documents)
        self.fail = fail
        self.calls = 0

    def extract(self) -> ExtractionResult:
        self.calls += 1
        if self.fail:
            raise ConfigurationError("Firestore is not initialized")
        records = [self.create_record(doc.get("id"), dict(doc)) for doc in self.documents]
        return self.get_extraction_result(records)


class FakeLoader(BaseLoader):
    """In-memory Hygraph that records every call."""

    def __init__(
        self,
        existing: Optional[Iterable[str]] = None,
        fail_create: Optional[Iterable[str]] = None,
        connected: bool = True
    ):
        super().__init__("fake-hygraph")
        self.users: Dict[str, AppUser] = {}
        for uid in existing or []:
            self.users[uid] = AppUser(**{"id": f"hg-{uid}", "uid": uid, "email": f"{uid}@existing.test"})
        self.fail_create = set(fail_create or [])
        self.connected = connected
        self.find_calls: List[str] = []
        self.create_calls: List[Dict[str, Any]] = []
        self._lock = threading.Lock()

    def find_by_uid(self, uid: str) -> Optional[AppUser]:
        with self._lock:
            self.find_calls.append(uid)
            return self.users.get(uid)

    def create_app_user(self, data: Dict[str, Any]) -> AppUser:
        with self._lock:
            self.create_calls.append(data)
            if data["uid"] in self.fail_create:
                raise HygraphError("Quota exceeded")
            user = AppUser(**{
                "id": f"hg-{data['uid']}",
                "uid": data["uid"],
                "email": data.get("email"),
                "displayName": data.get("displayName"),
                "role": data.get("role"),
                "isActive": data.get("isActive"),
            })
            self.users[data["uid"]] = user
            return user

    def validate_connection(self) -> bool:
        return self.connected

    @property
    def created_uids(self) -> List[str]:
        return [data["uid"] for data in self.create_calls]


@pytest.fixture
def make_extractor():
    return FakeExtractor


@pytest.fixture
def make_loader():
    return FakeLoader


@pytest.fixture
def checkpoint(tmp_path):
    return CheckpointStore(tmp_path / "migration-results.json")


@pytest.fixture
def controller():
    return ConcurrencyController(width=2, delay_seconds=0)


@pytest.fixture
def config(tmp_path):
    return MigrationConfig(
        concurrency=2,
        delay_seconds=0,
        output_path=str(tmp_path / "migration-results.json"),
        hygraph_endpoint="https://api.example.test/graphql",
        hygraph_token="token-123456789",
    )
