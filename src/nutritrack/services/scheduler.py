"""Periodic reminder and recommendation scheduler."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from contextlib import suppress
from dataclasses import dataclass, field
from datetime import UTC, datetime
from zoneinfo import ZoneInfo

from nutritrack.domain.models import UserRecord
from nutritrack.domain.reminders import (
    DAILY_GOAL_HOUR,
    MEAL_WINDOWS,
    MealWindow,
    ReminderCategory,
    ReminderNotification,
    meal_label_for_hour,
)
from nutritrack.services.goals import GoalEvaluator
from nutritrack.services.push import DEFAULT_TITLE, DispatchResult, PushDispatcher
from nutritrack.services.recommendations import RecommendationRequester
from nutritrack.services.reminders import NotificationDeduplicator, ReminderRepository
from nutritrack.services.stats import NutrientAggregator, local_day_bounds
from nutritrack.services.users import UserService, resolve_zone

_logger = logging.getLogger(__name__)

CELEBRATION_MESSAGE = (
    "Congratulations! You have reached your nutrition goals for today. "
    "Keep up the great work!"
)
CELEBRATION_TITLE = "Daily Goal"


def recommendation_message(suggestion: str) -> str:
    """Push body for a meal recommendation."""
    return f"We recommend you to eat {suggestion} for your remaining nutrition values."


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class TickReport:
    """Counts of what one tick delivered."""

    reminders_sent: int = 0
    recommendations_sent: int = 0
    celebrations_sent: int = 0
    errors: int = 0


@dataclass
class ReminderScheduler:
    """Runs the reminder passes on a fixed polling period.

    Each tick delivers due user-created reminders, then meal-window
    recommendations, then the end-of-day goal celebration. Users are
    evaluated concurrently and independently; a failure for one user is
    logged and never aborts the tick for others.
    """

    user_service: UserService
    reminder_repository: ReminderRepository
    deduplicator: NotificationDeduplicator
    aggregator: NutrientAggregator
    evaluator: GoalEvaluator
    recommender: RecommendationRequester
    dispatcher: PushDispatcher
    default_timezone: str = "UTC"
    tick_seconds: float = 15.0
    clock: Callable[[], datetime] = _utc_now
    _task: "asyncio.Task[None] | None" = field(default=None, init=False, repr=False)

    @property
    def is_running(self) -> bool:
        """Return True while the ticker task is alive."""
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start the ticker on the running event loop."""
        if self.is_running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())
        _logger.info("Reminder scheduler started (every %ss)", self.tick_seconds)

    async def stop(self) -> None:
        """Cancel the ticker and wait for it to finish."""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with suppress(asyncio.CancelledError):
            await task
        _logger.info("Reminder scheduler stopped")

    async def _run(self) -> None:
        while True:
            try:
                await self.run_tick()
            except Exception:
                _logger.exception("Reminder tick failed")
            await asyncio.sleep(self.tick_seconds)

    async def run_tick(self, now: datetime | None = None) -> TickReport:
        """Run every reminder pass once."""
        current = (now or self.clock()).astimezone(UTC)
        report = TickReport()
        await self._send_due_reminders(current, report)
        recipients = self.user_service.list_push_recipients()
        await self._meal_window_pass(recipients, current, report)
        await self._daily_goal_pass(recipients, current, report)
        return report

    async def _send_due_reminders(self, now: datetime, report: TickReport) -> None:
        reminders = self.reminder_repository.list_due(now)
        results = await asyncio.gather(
            *(
                self._guarded(
                    self._deliver_reminder(reminder, now),
                    report,
                    action="reminder",
                )
                for reminder in reminders
            )
        )
        report.reminders_sent += sum(results)

    async def _deliver_reminder(
        self, reminder: ReminderNotification, now: datetime
    ) -> bool:
        user = self.user_service.get_user(reminder.user_id)
        if user is None or not user.push_token:
            return False
        result = await self.dispatcher.dispatch(user.push_token, reminder.message)
        if not result.ok:
            self._forget_dead_token(user, result)
            return False
        self.reminder_repository.mark_sent(reminder.id, now)
        _logger.info("Reminder %s sent to user %s", reminder.id, user.id)
        return True

    async def _meal_window_pass(
        self, users: list[UserRecord], now: datetime, report: TickReport
    ) -> None:
        for window in MEAL_WINDOWS:
            results = await asyncio.gather(
                *(
                    self._guarded(
                        self._recommend_for_window(user, window, now),
                        report,
                        action=window.category.value,
                    )
                    for user in users
                    if window.closes_at(now.astimezone(self._zone_for(user)))
                )
            )
            report.recommendations_sent += sum(results)

    async def _recommend_for_window(
        self, user: UserRecord, window: MealWindow, now: datetime
    ) -> bool:
        local_now = now.astimezone(self._zone_for(user))
        tz = local_now.tzinfo
        day_start, day_end = local_day_bounds(local_now.date(), tz)
        if self.deduplicator.already_sent(user.id, window.category, day_start, day_end):
            return False
        window_start, window_end = window.bounds(local_now.date(), tz)
        if self.aggregator.has_meals_between(user.id, window_start, window_end):
            return False

        totals = self.aggregator.totals_between(user.id, day_start, day_end)
        evaluation = self.evaluator.evaluate(totals, user.goals)
        suggestion = await self.recommender.recommend(
            evaluation.remaining, meal_label_for_hour(local_now.hour)
        )
        if suggestion is None:
            return False
        message = recommendation_message(suggestion)
        return await self._dispatch_once(
            user, window.category, message, now, local_now.date().isoformat()
        )

    async def _daily_goal_pass(
        self, users: list[UserRecord], now: datetime, report: TickReport
    ) -> None:
        results = await asyncio.gather(
            *(
                self._guarded(
                    self._celebrate(user, now),
                    report,
                    action=ReminderCategory.DAILY_GOAL.value,
                )
                for user in users
                if now.astimezone(self._zone_for(user)).hour == DAILY_GOAL_HOUR
            )
        )
        report.celebrations_sent += sum(results)

    async def _celebrate(self, user: UserRecord, now: datetime) -> bool:
        local_now = now.astimezone(self._zone_for(user))
        day_start, day_end = local_day_bounds(local_now.date(), local_now.tzinfo)
        category = ReminderCategory.DAILY_GOAL
        if self.deduplicator.already_sent(user.id, category, day_start, day_end):
            return False
        totals = self.aggregator.totals_between(user.id, day_start, day_end)
        if not self.evaluator.evaluate(totals, user.goals).all_reached:
            return False
        return await self._dispatch_once(
            user,
            category,
            CELEBRATION_MESSAGE,
            now,
            local_now.date().isoformat(),
            title=CELEBRATION_TITLE,
        )

    async def _dispatch_once(  # noqa: PLR0913
        self,
        user: UserRecord,
        category: ReminderCategory,
        message: str,
        now: datetime,
        window_key: str,
        title: str = DEFAULT_TITLE,
    ) -> bool:
        if not user.push_token:
            return False
        result = await self.dispatcher.dispatch(user.push_token, message, title=title)
        if not result.ok:
            self._forget_dead_token(user, result)
            return False
        recorded = self.deduplicator.record_sent(
            user.id, category, message, now, window_key
        )
        if not recorded:
            _logger.warning(
                "Duplicate %s notification for user %s in window %s",
                category.value,
                user.id,
                window_key,
            )
        _logger.info("Sent %s notification to user %s", category.value, user.id)
        return True

    async def _guarded(
        self,
        call: Awaitable[bool],
        report: TickReport,
        *,
        action: str,
    ) -> bool:
        try:
            return await call
        except Exception:
            report.errors += 1
            _logger.exception("Reminder %s pass failed for one user", action)
            return False

    def _forget_dead_token(self, user: UserRecord, result: DispatchResult) -> None:
        if not result.device_gone:
            return
        self.user_service.clear_push_token(user.id)
        _logger.info("Cleared unregistered push token of user %s", user.id)

    def _zone_for(self, user: UserRecord) -> ZoneInfo:
        return resolve_zone(user.timezone, self.default_timezone)
