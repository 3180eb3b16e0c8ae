"""
Periodic reminder sweep driven by APScheduler.

A single interval job runs ``SweepDueRemindersUseCase`` on the event loop.
``max_instances=1`` keeps ticks from overlapping and ``coalesce=True``
merges ticks missed while the loop was busy into one run.
"""

from datetime import UTC, datetime, timedelta

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from bizdesk.application.use_cases.sweep_due_reminders import (
    SweepDueRemindersUseCase,
    SweepResult,
)
from bizdesk.config import get_logger

logger = get_logger(__name__)

SWEEP_JOB_ID = "reminder_sweep"


class ReminderScheduler:
    """Owns the AsyncIOScheduler that ticks the reminder sweep."""

    def __init__(
        self,
        sweep: SweepDueRemindersUseCase,
        interval_seconds: int = 60,
        run_on_startup: bool = True,
    ):
        self._sweep = sweep
        self._interval_seconds = interval_seconds
        self._run_on_startup = run_on_startup
        self._scheduler: AsyncIOScheduler | None = None
        self.last_result: SweepResult | None = None

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    @property
    def interval_seconds(self) -> int:
        return self._interval_seconds

    def start(self) -> None:
        """Start ticking. Must be called from inside the running event loop."""
        if self._scheduler is not None:
            logger.info("scheduler_already_running")
            return

        scheduler = AsyncIOScheduler(timezone=UTC)
        job_options = {}
        if self._run_on_startup:
            job_options["next_run_time"] = datetime.now(UTC)

        scheduler.add_job(
            self.tick,
            trigger="interval",
            seconds=self._interval_seconds,
            id=SWEEP_JOB_ID,
            replace_existing=True,
            max_instances=1,
            coalesce=True,
            **job_options,
        )
        scheduler.start()
        self._scheduler = scheduler

        logger.info(
            "scheduler_started",
            job_id=SWEEP_JOB_ID,
            interval_seconds=self._interval_seconds,
            run_on_startup=self._run_on_startup,
        )

    def shutdown(self) -> None:
        """Stop scheduling further ticks; a tick in flight runs to completion."""
        if self._scheduler is None:
            return
        self._scheduler.shutdown(wait=False)
        self._scheduler = None
        logger.info("scheduler_stopped", job_id=SWEEP_JOB_ID)

    async def tick(self, trigger: str = "scheduled") -> SweepResult:
        """Run one sweep and remember its result."""
        result = await self._sweep.execute(trigger=trigger)
        self.last_result = result
        return result


def build_reminder_scheduler(settings=None) -> ReminderScheduler:
    """Create a scheduler wired to the default stores, notifier and settings."""
    if settings is None:
        from bizdesk.config import get_settings

        settings = get_settings()

    sweep = SweepDueRemindersUseCase(
        tolerance=timedelta(seconds=settings.scheduler.tolerance_seconds)
    )
    return ReminderScheduler(
        sweep,
        interval_seconds=settings.scheduler.interval_seconds,
        run_on_startup=settings.scheduler.run_on_startup,
    )
