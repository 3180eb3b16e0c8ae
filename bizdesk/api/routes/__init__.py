"""API route modules."""

from bizdesk.api.routes.clients import router as clients_router
from bizdesk.api.routes.health import router as health_router
from bizdesk.api.routes.products import router as products_router
from bizdesk.api.routes.reminders import router as reminders_router
from bizdesk.api.routes.sales import router as sales_router
from bizdesk.api.routes.services import router as services_router
from bizdesk.api.routes.users import router as users_router

__all__ = [
    "health_router",
    "users_router",
    "reminders_router",
    "clients_router",
    "products_router",
    "services_router",
    "sales_router",
]
