"""
Sweep Due Reminders Use Case.

One tick of the notification engine: load every pending reminder, decide
which ones are due now, notify their user and/or client, and record
``last_notified``. Each reminder is processed in isolation; no error from a
single record escapes the tick.
"""

import asyncio
import time
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from uuid import uuid4

import structlog

from bizdesk.config import get_logger
from bizdesk.core.clock import as_utc, utc_now
from bizdesk.core.entities.client import Client
from bizdesk.core.entities.reminder import Reminder
from bizdesk.core.entities.user import User
from bizdesk.core.interfaces.notifier import INotifier, NotificationResult
from bizdesk.core.interfaces.storage import IClientStore, IReminderStore, IUserStore
from bizdesk.core.services.due_time import DEFAULT_TOLERANCE, evaluate

logger = get_logger(__name__)

_sweep_lock: asyncio.Lock | None = None
_sweep_lock_loop: asyncio.AbstractEventLoop | None = None


def get_sweep_lock() -> asyncio.Lock:
    """Get the process-wide sweep lock for the running event loop."""
    global _sweep_lock, _sweep_lock_loop
    loop = asyncio.get_running_loop()
    if _sweep_lock is None or _sweep_lock_loop is not loop:
        _sweep_lock = asyncio.Lock()
        _sweep_lock_loop = loop
    return _sweep_lock


@dataclass
class SweepResult:
    """Counts for one sweep tick."""

    scanned: int = 0
    fired: int = 0
    user_notified: int = 0
    client_notified: int = 0
    notify_failures: int = 0
    errors: int = 0
    started_at: datetime = field(default_factory=utc_now)
    duration_ms: float = 0.0


class SweepDueRemindersUseCase:
    """Evaluate all pending reminders once and send the notifications that are due."""

    def __init__(
        self,
        reminder_store: IReminderStore | None = None,
        user_store: IUserStore | None = None,
        client_store: IClientStore | None = None,
        notifier: INotifier | None = None,
        tolerance: timedelta = DEFAULT_TOLERANCE,
    ):
        self._reminder_store = reminder_store
        self._user_store = user_store
        self._client_store = client_store
        self._notifier = notifier
        self._tolerance = tolerance

    async def _get_reminder_store(self) -> IReminderStore:
        if self._reminder_store is None:
            from bizdesk.infrastructure.storage.sqlite import get_reminder_store

            self._reminder_store = await get_reminder_store()
        return self._reminder_store

    async def _get_user_store(self) -> IUserStore:
        if self._user_store is None:
            from bizdesk.infrastructure.storage.sqlite import get_user_store

            self._user_store = await get_user_store()
        return self._user_store

    async def _get_client_store(self) -> IClientStore:
        if self._client_store is None:
            from bizdesk.infrastructure.storage.sqlite import get_client_store

            self._client_store = await get_client_store()
        return self._client_store

    def _get_notifier(self) -> INotifier:
        if self._notifier is None:
            from bizdesk.infrastructure.notifications import get_notifier

            self._notifier = get_notifier()
        return self._notifier

    async def execute(
        self, now: datetime | None = None, trigger: str = "manual"
    ) -> SweepResult:
        """
        Run one sweep tick.

        Waits for any sweep already in progress, then loads pending
        reminders afresh so notifications it recorded are not repeated.

        Args:
            now: Clock reading shared by every reminder in this tick
            trigger: What started the sweep ("scheduled", "api", "cli");
                bound with a sweep_id onto every log line it emits

        Returns:
            SweepResult with per-tick counts
        """
        with structlog.contextvars.bound_contextvars(
            sweep_id=uuid4().hex[:8], trigger=trigger
        ):
            lock = get_sweep_lock()
            if lock.locked():
                logger.debug("sweep_waiting")
            async with lock:
                return await self._sweep(now)

    async def _sweep(self, now: datetime | None) -> SweepResult:
        now = as_utc(now) if now is not None else utc_now()
        result = SweepResult(started_at=now)
        start = time.perf_counter()
        logger.debug("sweep_started", now=now.isoformat())

        try:
            reminders = await (await self._get_reminder_store()).find_pending()
        except Exception as e:
            result.errors += 1
            result.duration_ms = (time.perf_counter() - start) * 1000
            logger.error("sweep_load_failed", error=str(e))
            return result

        for reminder in reminders:
            result.scanned += 1
            try:
                await self._process(reminder, now, result)
            except Exception as e:
                result.errors += 1
                logger.error(
                    "sweep_reminder_failed",
                    reminder_id=reminder.id,
                    tenant_id=reminder.tenant_id,
                    error=str(e),
                    error_type=type(e).__name__,
                )

        result.duration_ms = (time.perf_counter() - start) * 1000
        log = logger.info if result.fired or result.errors else logger.debug
        log(
            "sweep_complete",
            scanned=result.scanned,
            fired=result.fired,
            user_notified=result.user_notified,
            client_notified=result.client_notified,
            notify_failures=result.notify_failures,
            errors=result.errors,
            duration_ms=round(result.duration_ms, 2),
        )
        return result

    async def _process(self, reminder: Reminder, now: datetime, result: SweepResult) -> None:
        evaluation = evaluate(reminder, now, self._tolerance)
        if not evaluation.should_notify:
            return

        result.fired += 1
        kind = "advance" if evaluation.notify_advance else "due"

        # Resolve recipients before sending anything; a lookup error skips the
        # whole reminder so it is retried next tick.
        user = await self._resolve_user(reminder) if reminder.notify_user else None
        client = (
            await self._resolve_client(reminder)
            if reminder.notify_client and reminder.client_id is not None
            else None
        )

        notifier = self._get_notifier()
        if user is not None:
            outcome = await self._notify(
                "user", reminder, notifier.notify_user_of_reminder(user, reminder)
            )
            if outcome:
                result.user_notified += 1
            else:
                result.notify_failures += 1
        if client is not None:
            outcome = await self._notify(
                "client", reminder, notifier.notify_client_of_reminder(client, reminder)
            )
            if outcome:
                result.client_notified += 1
            else:
                result.notify_failures += 1

        store = await self._get_reminder_store()
        await store.update(reminder.id, {"last_notified": now})

        logger.info(
            "reminder_notified",
            reminder_id=reminder.id,
            tenant_id=reminder.tenant_id,
            kind=kind,
            user=user is not None,
            client=client is not None,
        )

    async def _resolve_user(self, reminder: Reminder) -> User | None:
        user = await (await self._get_user_store()).get(reminder.tenant_id)
        if user is None:
            logger.warning(
                "reminder_user_missing",
                reminder_id=reminder.id,
                tenant_id=reminder.tenant_id,
            )
        return user

    async def _resolve_client(self, reminder: Reminder) -> Client | None:
        client = await (await self._get_client_store()).get(
            reminder.client_id, reminder.tenant_id
        )
        if client is None:
            logger.warning(
                "reminder_client_missing",
                reminder_id=reminder.id,
                client_id=reminder.client_id,
            )
        return client

    @staticmethod
    async def _notify(recipient: str, reminder: Reminder, call) -> bool:
        """Await one notifier call, logging instead of raising on failure."""
        try:
            outcome: NotificationResult = await call
        except Exception as e:
            logger.error(
                "notifier_failed",
                recipient=recipient,
                reminder_id=reminder.id,
                error=str(e),
            )
            return False
        if not outcome.ok:
            logger.warning(
                "notifier_failed",
                recipient=recipient,
                reminder_id=reminder.id,
                error=outcome.error,
            )
        return outcome.ok
