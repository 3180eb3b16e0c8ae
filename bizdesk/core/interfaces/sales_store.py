"""Abstract interface for sales storage."""

from abc import ABC, abstractmethod
from datetime import datetime

from bizdesk.core.entities.sale import Sale, SaleType


class ISalesStore(ABC):
    """Interface for sale persistence."""

    @abstractmethod
    async def create_sale(self, sale: Sale) -> Sale:
        """Record a sale."""
        pass

    @abstractmethod
    async def get_sale(self, sale_id: int, tenant_id: int) -> Sale | None:
        """Get a sale owned by the tenant."""
        pass

    @abstractmethod
    async def update_sale(self, sale: Sale) -> Sale:
        """
        Overwrite a stored sale.

        Raises:
            SaleNotFoundError: if the tenant has no such sale
        """
        pass

    @abstractmethod
    async def delete_sale(self, sale_id: int, tenant_id: int) -> bool:
        """Delete a sale."""
        pass

    @abstractmethod
    async def list_sales(
        self,
        tenant_id: int,
        sale_type: SaleType | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
        search: str | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Sale]:
        """List a tenant's sales, newest first."""
        pass

    @abstractmethod
    async def delete_all_sales(self, tenant_id: int) -> int:
        """Delete all of a tenant's sales. Returns how many were removed."""
        pass

    @abstractmethod
    async def sold_quantities(self, tenant_id: int) -> dict[int, int]:
        """Total quantity sold per linked product across a tenant's product sales."""
        pass
