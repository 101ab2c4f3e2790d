"""Tests for Supabase adapter implementations."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import uuid4

from nutritrack.adapters.supabase_meal_repository import SupabaseMealRepository
from nutritrack.adapters.supabase_reminder_repository import (
    SupabaseReminderRepository,
)
from nutritrack.adapters.supabase_user_repository import SupabaseUserRepository
from nutritrack.domain.nutrition import MacroProfile
from nutritrack.domain.reminders import ReminderCategory


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    response_queue: dict[str, list[list[dict[str, object]]]] = field(
        default_factory=lambda: {
            "select": [],
            "insert": [],
            "upsert": [],
            "update": [],
            "delete": [],
        }
    )
    last_payload: object | None = None
    last_options: dict[str, object] = field(default_factory=dict)
    last_filters: list[tuple[str, str, object]] = field(default_factory=list)
    _negate: bool = False

    def queue(self, action: str, data: list[dict[str, object]]) -> None:
        self.response_queue[action].append(data)

    def _start(self, action: str) -> "FakeTable":
        self._action = action
        self.last_filters = []
        return self

    def select(self, *_args) -> "FakeTable":
        return self._start("select")

    def insert(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_payload = payload
        return self._start("insert")

    def upsert(self, payload, **options) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_payload = payload
        self.last_options = options
        return self._start("upsert")

    def update(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_payload = payload
        return self._start("update")

    def delete(self) -> "FakeTable":
        return self._start("delete")

    @property
    def not_(self) -> "FakeTable":
        self._negate = True
        return self

    def _filter(self, op: str, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        if self._negate:
            op = f"not.{op}"
            self._negate = False
        self.last_filters.append((op, column, value))
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        return self._filter("eq", column, value)

    def is_(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        return self._filter("is", column, value)

    def gte(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        return self._filter("gte", column, value)

    def lt(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        return self._filter("lt", column, value)

    def lte(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        return self._filter("lte", column, value)

    def limit(self, _count: int) -> "FakeTable":
        return self

    def order(self, _column: str, desc: bool = False) -> "FakeTable":
        return self

    def execute(self) -> FakeResponse:
        action = getattr(self, "_action", "select")
        queue = self.response_queue.get(action, [])
        data = queue.pop(0) if queue else []
        return FakeResponse(data=data)


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


def _user_row(user_id: str, push_token: str | None = None) -> dict[str, object]:
    return {
        "id": user_id,
        "goal_calories": 2000,
        "goal_protein_g": 150,
        "goal_fat_g": None,
        "goal_carbs_g": 250,
        "push_token": push_token,
        "timezone": "Europe/Berlin",
    }


def _meal_row(meal_id: str, user_id: str) -> dict[str, object]:
    return {
        "id": meal_id,
        "user_id": user_id,
        "name": "Soup",
        "logged_at": "2024-05-01T12:30:00+00:00",
        "total_calories": 320,
        "total_protein_g": 12.5,
        "total_fat_g": 8,
        "total_carbs_g": 40,
    }


def _reminder_row(reminder_id: str, user_id: str) -> dict[str, object]:
    return {
        "id": reminder_id,
        "user_id": user_id,
        "category": "custom",
        "scheduled_at": "2024-05-01T10:00:00+00:00",
        "message": "Drink water",
        "sent": False,
        "window_key": None,
    }


def test_supabase_user_repository_reads_goals() -> None:
    client = FakeSupabaseClient()
    users_table = client.table("users")
    user_id = str(uuid4())
    users_table.queue("select", [_user_row(user_id)])

    user = SupabaseUserRepository(client).get_user(uuid4())

    assert user is not None
    assert str(user.id) == user_id
    assert user.goals == MacroProfile(2000, 150, 0, 250)
    assert user.push_token is None
    assert user.timezone == "Europe/Berlin"


def test_supabase_user_repository_missing_user() -> None:
    assert SupabaseUserRepository(FakeSupabaseClient()).get_user(uuid4()) is None


def test_supabase_user_repository_updates() -> None:
    client = FakeSupabaseClient()
    users_table = client.table("users")
    repository = SupabaseUserRepository(client)
    user_id = uuid4()

    repository.update_goals(user_id, MacroProfile(1800, 120, 60, 200))
    assert users_table.last_payload["goal_calories"] == 1800
    assert "updated_at" in users_table.last_payload
    assert users_table.last_filters == [("eq", "id", str(user_id))]

    repository.set_push_token(user_id, None)
    assert users_table.last_payload == {"push_token": None}

    repository.set_timezone(user_id, "UTC")
    assert users_table.last_payload == {"timezone": "UTC"}


def test_supabase_user_repository_lists_push_recipients() -> None:
    client = FakeSupabaseClient()
    users_table = client.table("users")
    users_table.queue(
        "select", [_user_row(str(uuid4()), push_token="ExpoPushToken[a]")]
    )

    users = SupabaseUserRepository(client).list_users_with_push_token()

    assert [user.push_token for user in users] == ["ExpoPushToken[a]"]
    assert users_table.last_filters == [("not.is", "push_token", "null")]


def test_supabase_meal_repository_roundtrip() -> None:
    client = FakeSupabaseClient()
    table = client.table("meal_logs")
    user_id = str(uuid4())
    meal_id = str(uuid4())
    table.queue("insert", [_meal_row(meal_id, user_id)])
    table.queue("select", [_meal_row(meal_id, user_id)])

    repository = SupabaseMealRepository(client)
    created = repository.create_meal(
        uuid4(),
        "Soup",
        datetime(2024, 5, 1, 12, 30, tzinfo=UTC),
        MacroProfile(320, 12.5, 8, 40),
    )
    assert table.last_payload["total_protein_g"] == 12.5
    assert table.last_payload["logged_at"] == "2024-05-01T12:30:00+00:00"

    meals = repository.list_meals(
        uuid4(),
        datetime(2024, 5, 1, tzinfo=UTC),
        datetime(2024, 5, 2, tzinfo=UTC),
    )

    assert str(created.id) == meal_id
    assert created.consumed_at == datetime(2024, 5, 1, 12, 30, tzinfo=UTC)
    assert meals[0].macros == MacroProfile(320, 12.5, 8, 40)
    assert ("gte", "logged_at", "2024-05-01T00:00:00+00:00") in table.last_filters
    assert ("lt", "logged_at", "2024-05-02T00:00:00+00:00") in table.last_filters


def test_supabase_meal_repository_update_and_delete() -> None:
    client = FakeSupabaseClient()
    table = client.table("meal_logs")
    repository = SupabaseMealRepository(client)
    meal_id = uuid4()

    assert repository.get_meal(meal_id) is None

    repository.update_meal_macros(meal_id, MacroProfile(100, 1, 2, 3))
    assert table.last_payload["total_carbs_g"] == 3

    repository.delete_meal(meal_id)
    assert table.last_filters == [("eq", "id", str(meal_id))]


def test_supabase_reminder_repository_record_sent_upserts() -> None:
    client = FakeSupabaseClient()
    table = client.table("reminders")
    table.queue("upsert", [{"id": str(uuid4())}])
    repository = SupabaseReminderRepository(client)
    sent_at = datetime(2024, 5, 1, 17, tzinfo=UTC)

    first = repository.record_sent(
        uuid4(), ReminderCategory.LUNCH, sent_at, "Eat", "2024-05-01"
    )
    duplicate = repository.record_sent(
        uuid4(), ReminderCategory.LUNCH, sent_at, "Eat", "2024-05-01"
    )

    assert first
    assert not duplicate
    assert table.last_payload["category"] == "lunch"
    assert table.last_payload["sent"] is True
    assert table.last_payload["window_key"] == "2024-05-01"
    assert table.last_options == {
        "on_conflict": "user_id,category,window_key",
        "ignore_duplicates": True,
    }


def test_supabase_reminder_repository_find_sent() -> None:
    client = FakeSupabaseClient()
    table = client.table("reminders")
    user_id = str(uuid4())
    row = _reminder_row(str(uuid4()), user_id) | {
        "category": "daily-goal",
        "sent": True,
        "window_key": "2024-05-01",
    }
    table.queue("select", [row])
    repository = SupabaseReminderRepository(client)

    found = repository.find_sent(
        uuid4(),
        ReminderCategory.DAILY_GOAL,
        datetime(2024, 5, 1, tzinfo=UTC),
        datetime(2024, 5, 2, tzinfo=UTC),
    )
    missing = repository.find_sent(
        uuid4(),
        ReminderCategory.DAILY_GOAL,
        datetime(2024, 5, 1, tzinfo=UTC),
        datetime(2024, 5, 2, tzinfo=UTC),
    )

    assert found is not None
    assert found.category == ReminderCategory.DAILY_GOAL
    assert found.window_key == "2024-05-01"
    assert missing is None
    assert ("eq", "sent", True) in table.last_filters


def test_supabase_reminder_repository_custom_lifecycle() -> None:
    client = FakeSupabaseClient()
    table = client.table("reminders")
    user_id = str(uuid4())
    reminder_id = str(uuid4())
    table.queue("insert", [_reminder_row(reminder_id, user_id)])
    table.queue("select", [_reminder_row(reminder_id, user_id)])
    table.queue("delete", [{"id": reminder_id}])
    repository = SupabaseReminderRepository(client)

    created = repository.create_reminder(
        uuid4(),
        ReminderCategory.CUSTOM,
        datetime(2024, 5, 1, 10, tzinfo=UTC),
        "Drink water",
    )
    due = repository.list_due(datetime(2024, 5, 1, 11, tzinfo=UTC))
    assert ("lte", "scheduled_at", "2024-05-01T11:00:00+00:00") in table.last_filters

    repository.mark_sent(created.id, datetime(2024, 5, 1, 11, tzinfo=UTC))
    assert table.last_payload["sent"] is True
    assert ("eq", "sent", False) in table.last_filters

    assert repository.delete_reminder(created.user_id, created.id)
    assert not repository.delete_reminder(created.user_id, created.id)
    assert str(created.id) == reminder_id
    assert [reminder.message for reminder in due] == ["Drink water"]
    assert repository.list_for_user(created.user_id) == []
