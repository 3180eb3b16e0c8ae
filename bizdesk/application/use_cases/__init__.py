"""Application use cases."""

from bizdesk.application.use_cases.complete_reminder import CompleteReminderUseCase
from bizdesk.application.use_cases.create_reminder import CreateReminderUseCase
from bizdesk.application.use_cases.delete_sale import DeleteAllSalesUseCase, DeleteSaleUseCase
from bizdesk.application.use_cases.record_sale import RecordSaleUseCase
from bizdesk.application.use_cases.sweep_due_reminders import (
    SweepDueRemindersUseCase,
    SweepResult,
)
from bizdesk.application.use_cases.update_reminder import UpdateReminderUseCase
from bizdesk.application.use_cases.update_sale import UpdateSaleUseCase

__all__ = [
    "SweepDueRemindersUseCase",
    "SweepResult",
    "CompleteReminderUseCase",
    "CreateReminderUseCase",
    "UpdateReminderUseCase",
    "RecordSaleUseCase",
    "UpdateSaleUseCase",
    "DeleteSaleUseCase",
    "DeleteAllSalesUseCase",
]
