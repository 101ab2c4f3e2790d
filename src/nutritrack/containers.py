"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from nutritrack.adapters.expo_push_client import HttpxExpoPushClient
from nutritrack.adapters.openai_recommendation_client import (
    OpenAIRecommendationClient,
)
from nutritrack.adapters.supabase_meal_repository import SupabaseMealRepository
from nutritrack.adapters.supabase_reminder_repository import (
    SupabaseReminderRepository,
)
from nutritrack.adapters.supabase_user_repository import SupabaseUserRepository
from nutritrack.config import Settings
from nutritrack.services.goals import GoalEvaluator
from nutritrack.services.meals import MealService
from nutritrack.services.push import PushDispatcher
from nutritrack.services.recommendations import RecommendationRequester
from nutritrack.services.reminders import NotificationDeduplicator, ReminderService
from nutritrack.services.scheduler import ReminderScheduler
from nutritrack.services.stats import NutrientAggregator
from nutritrack.services.users import UserService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    user_service: UserService
    meal_service: MealService
    aggregator: NutrientAggregator
    goal_evaluator: GoalEvaluator
    reminder_service: ReminderService
    reminder_scheduler: ReminderScheduler
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    user_repository = SupabaseUserRepository(supabase_client)
    meal_repository = SupabaseMealRepository(supabase_client)
    reminder_repository = SupabaseReminderRepository(supabase_client)

    user_service = UserService(user_repository)
    meal_service = MealService(meal_repository)
    aggregator = NutrientAggregator(meal_repository)
    goal_evaluator = GoalEvaluator()
    reminder_service = ReminderService(reminder_repository)

    recommendation_client = OpenAIRecommendationClient.create(
        api_key=resolved_settings.openai_api_key,
        timeout_seconds=resolved_settings.openai_timeout_seconds,
        store=resolved_settings.openai_store,
    )
    push_client = HttpxExpoPushClient.create(
        push_url=resolved_settings.expo_push_url,
        access_token=resolved_settings.expo_access_token,
        timeout_seconds=resolved_settings.push_timeout_seconds,
    )
    reminder_scheduler = ReminderScheduler(
        user_service=user_service,
        reminder_repository=reminder_repository,
        deduplicator=NotificationDeduplicator(reminder_repository),
        aggregator=aggregator,
        evaluator=goal_evaluator,
        recommender=RecommendationRequester(
            client=recommendation_client,
            model=resolved_settings.openai_model,
        ),
        dispatcher=PushDispatcher(push_client),
        default_timezone=resolved_settings.reminder_timezone,
        tick_seconds=resolved_settings.reminder_tick_seconds,
    )

    async def close_resources() -> None:
        await push_client.close()
        await recommendation_client.close()

    return AppContainer(
        settings=resolved_settings,
        user_service=user_service,
        meal_service=meal_service,
        aggregator=aggregator,
        goal_evaluator=goal_evaluator,
        reminder_service=reminder_service,
        reminder_scheduler=reminder_scheduler,
        close_resources=close_resources,
    )
