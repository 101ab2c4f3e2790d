"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from datetime import datetime
from uuid import UUID, uuid4

import pytest

from nutritrack.config import Settings
from nutritrack.containers import AppContainer
from nutritrack.domain.meals import MealRecord
from nutritrack.domain.models import UserRecord
from nutritrack.domain.nutrition import MacroProfile
from nutritrack.domain.reminders import ReminderCategory, ReminderNotification
from nutritrack.services.goals import GoalEvaluator
from nutritrack.services.meals import MealRepository, MealService
from nutritrack.services.push import PushClient, PushDispatcher
from nutritrack.services.recommendations import (
    RecommendationClient,
    RecommendationRequester,
)
from nutritrack.services.reminders import (
    NotificationDeduplicator,
    ReminderRepository,
    ReminderService,
)
from nutritrack.services.scheduler import ReminderScheduler
from nutritrack.services.stats import NutrientAggregator, StatsRepository
from nutritrack.services.users import UserRepository, UserService

PUSH_TOKEN = "ExponentPushToken[test-device]"

# Shaped like a JWT so supabase.create_client accepts it.
FAKE_SERVICE_KEY = (
    "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9."
    "eyJyb2xlIjoic2VydmljZV9yb2xlIn0."
    "c2lnbmF0dXJl"
)


@dataclass
class InMemoryUserRepository(UserRepository):
    """In-memory user repository for tests."""

    users: dict[UUID, UserRecord] = field(default_factory=dict)

    def add(
        self,
        goals: MacroProfile | None = None,
        push_token: str | None = PUSH_TOKEN,
        timezone: str | None = None,
    ) -> UserRecord:
        user = UserRecord(
            id=uuid4(),
            goals=goals or MacroProfile(2000, 150, 70, 250),
            push_token=push_token,
            timezone=timezone,
        )
        self.users[user.id] = user
        return user

    def get_user(self, user_id: UUID) -> UserRecord | None:
        return self.users.get(user_id)

    def update_goals(self, user_id: UUID, goals: MacroProfile) -> None:
        self.users[user_id] = replace(self.users[user_id], goals=goals)

    def set_push_token(self, user_id: UUID, push_token: str | None) -> None:
        self.users[user_id] = replace(self.users[user_id], push_token=push_token)

    def set_timezone(self, user_id: UUID, timezone_name: str) -> None:
        self.users[user_id] = replace(self.users[user_id], timezone=timezone_name)

    def list_users_with_push_token(self) -> list[UserRecord]:
        return [user for user in self.users.values() if user.push_token is not None]


@dataclass
class InMemoryMealRepository(MealRepository, StatsRepository):
    """In-memory meal repository for tests."""

    meals: dict[UUID, MealRecord] = field(default_factory=dict)

    def add(
        self, user_id: UUID, consumed_at: datetime, macros: MacroProfile
    ) -> MealRecord:
        return self.create_meal(user_id, "meal", consumed_at, macros)

    def create_meal(
        self,
        user_id: UUID,
        name: str,
        consumed_at: datetime,
        macros: MacroProfile,
    ) -> MealRecord:
        meal = MealRecord(
            id=uuid4(),
            user_id=user_id,
            name=name,
            consumed_at=consumed_at,
            macros=macros,
        )
        self.meals[meal.id] = meal
        return meal

    def get_meal(self, meal_id: UUID) -> MealRecord | None:
        return self.meals.get(meal_id)

    def update_meal_macros(self, meal_id: UUID, macros: MacroProfile) -> None:
        self.meals[meal_id] = replace(self.meals[meal_id], macros=macros)

    def delete_meal(self, meal_id: UUID) -> None:
        self.meals.pop(meal_id, None)

    def list_meals(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[MealRecord]:
        return [
            meal
            for meal in self.meals.values()
            if meal.user_id == user_id and start <= meal.consumed_at < end
        ]


@dataclass
class InMemoryReminderRepository(ReminderRepository):
    """In-memory reminder repository enforcing one row per window."""

    reminders: dict[UUID, ReminderNotification] = field(default_factory=dict)

    def create_reminder(
        self,
        user_id: UUID,
        category: ReminderCategory,
        scheduled_at: datetime,
        message: str,
    ) -> ReminderNotification:
        reminder = ReminderNotification(
            id=uuid4(),
            user_id=user_id,
            category=category,
            scheduled_at=scheduled_at,
            message=message,
            sent=False,
        )
        self.reminders[reminder.id] = reminder
        return reminder

    def record_sent(  # noqa: PLR0913
        self,
        user_id: UUID,
        category: ReminderCategory,
        sent_at: datetime,
        message: str,
        window_key: str,
    ) -> bool:
        for reminder in self.reminders.values():
            if (
                reminder.user_id == user_id
                and reminder.category == category
                and reminder.window_key == window_key
            ):
                return False
        reminder = ReminderNotification(
            id=uuid4(),
            user_id=user_id,
            category=category,
            scheduled_at=sent_at,
            message=message,
            sent=True,
            window_key=window_key,
        )
        self.reminders[reminder.id] = reminder
        return True

    def find_sent(
        self,
        user_id: UUID,
        category: ReminderCategory,
        start: datetime,
        end: datetime,
    ) -> ReminderNotification | None:
        for reminder in self.reminders.values():
            if (
                reminder.user_id == user_id
                and reminder.category == category
                and reminder.sent
                and start <= reminder.scheduled_at < end
            ):
                return reminder
        return None

    def list_due(self, now: datetime) -> list[ReminderNotification]:
        return [
            reminder
            for reminder in self.reminders.values()
            if not reminder.sent and reminder.scheduled_at <= now
        ]

    def mark_sent(self, reminder_id: UUID, sent_at: datetime) -> None:
        self.reminders[reminder_id] = replace(self.reminders[reminder_id], sent=True)

    def list_for_user(self, user_id: UUID) -> list[ReminderNotification]:
        return sorted(
            (r for r in self.reminders.values() if r.user_id == user_id),
            key=lambda reminder: reminder.scheduled_at,
            reverse=True,
        )

    def delete_reminder(self, user_id: UUID, reminder_id: UUID) -> bool:
        reminder = self.reminders.get(reminder_id)
        if reminder is None or reminder.user_id != user_id:
            return False
        del self.reminders[reminder_id]
        return True

    def sent_in(self, category: ReminderCategory) -> list[ReminderNotification]:
        return [
            reminder
            for reminder in self.reminders.values()
            if reminder.category == category and reminder.sent
        ]


@dataclass
class FakeRecommendationClient(RecommendationClient):
    """Fake LLM client returning a fixed answer or raising."""

    answer: str = "Grilled chicken salad"
    error: Exception | None = None
    prompts: list[str] = field(default_factory=list)

    async def generate(self, *, model: str, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.answer


@dataclass
class FakePushClient(PushClient):
    """Fake push gateway that records notifications."""

    sent: list[tuple[str, str, str]] = field(default_factory=list)
    ticket: dict[str, object] = field(
        default_factory=lambda: {"status": "ok", "id": "ticket-1"}
    )
    error: Exception | None = None

    async def send(
        self, token: str, title: str, body: str, data: dict[str, object]
    ) -> dict[str, object]:
        if self.error is not None:
            raise self.error
        self.sent.append((token, title, body))
        return self.ticket


@dataclass
class SchedulerHarness:
    """Scheduler wired to in-memory collaborators."""

    users: InMemoryUserRepository
    meals: InMemoryMealRepository
    reminders: InMemoryReminderRepository
    recommendations: FakeRecommendationClient
    push: FakePushClient
    scheduler: ReminderScheduler


def build_scheduler(
    users: InMemoryUserRepository | None = None,
    meals: InMemoryMealRepository | None = None,
    reminders: InMemoryReminderRepository | None = None,
    recommendations: FakeRecommendationClient | None = None,
    push: FakePushClient | None = None,
) -> SchedulerHarness:
    users = users or InMemoryUserRepository()
    meals = meals or InMemoryMealRepository()
    reminders = reminders or InMemoryReminderRepository()
    recommendations = recommendations or FakeRecommendationClient()
    push = push or FakePushClient()
    scheduler = ReminderScheduler(
        user_service=UserService(users),
        reminder_repository=reminders,
        deduplicator=NotificationDeduplicator(reminders),
        aggregator=NutrientAggregator(meals),
        evaluator=GoalEvaluator(),
        recommender=RecommendationRequester(client=recommendations, model="test"),
        dispatcher=PushDispatcher(push),
        tick_seconds=0.01,
    )
    return SchedulerHarness(
        users=users,
        meals=meals,
        reminders=reminders,
        recommendations=recommendations,
        push=push,
        scheduler=scheduler,
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key=FAKE_SERVICE_KEY,
        api_token="api-token",
        openai_api_key="openai-key",
        reminders_enabled=False,
    )


@pytest.fixture
def harness() -> SchedulerHarness:
    return build_scheduler()


@pytest.fixture
def container(settings: Settings, harness: SchedulerHarness) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        user_service=harness.scheduler.user_service,
        meal_service=MealService(harness.meals),
        aggregator=harness.scheduler.aggregator,
        goal_evaluator=harness.scheduler.evaluator,
        reminder_service=ReminderService(harness.reminders),
        reminder_scheduler=harness.scheduler,
        close_resources=close_resources,
    )
