"""Abstract interface for product and service catalog storage."""

from abc import ABC, abstractmethod

from bizdesk.core.entities.catalog import Product, Service


class ICatalogStore(ABC):
    """Interface for a tenant's products and services."""

    # Product operations
    @abstractmethod
    async def create_product(self, product: Product) -> Product:
        """Create a product."""
        pass

    @abstractmethod
    async def get_product(self, product_id: int, tenant_id: int) -> Product | None:
        """Get a product owned by the tenant."""
        pass

    @abstractmethod
    async def find_duplicate_product(
        self,
        tenant_id: int,
        name: str,
        category: str,
        product_type: str | None,
        exclude_id: int | None = None,
    ) -> Product | None:
        """Find a product with the same case-insensitive name, category and type."""
        pass

    @abstractmethod
    async def update_product(self, product: Product) -> Product:
        """Update a product."""
        pass

    @abstractmethod
    async def delete_product(self, product_id: int, tenant_id: int) -> bool:
        """Delete a product."""
        pass

    @abstractmethod
    async def list_products(
        self, tenant_id: int, category: str | None = None
    ) -> list[Product]:
        """List a tenant's products."""
        pass

    @abstractmethod
    async def list_low_stock(self, tenant_id: int) -> list[Product]:
        """List products with stock at or below their minimum."""
        pass

    @abstractmethod
    async def adjust_stock(
        self, product_id: int, tenant_id: int, delta: int
    ) -> Product | None:
        """Add ``delta`` to stock, never going below zero."""
        pass

    # Service operations
    @abstractmethod
    async def create_service(self, service: Service) -> Service:
        """Create a service."""
        pass

    @abstractmethod
    async def get_service(self, service_id: int, tenant_id: int) -> Service | None:
        """Get a service owned by the tenant."""
        pass

    @abstractmethod
    async def update_service(self, service: Service) -> Service:
        """Update a service."""
        pass

    @abstractmethod
    async def delete_service(self, service_id: int, tenant_id: int) -> bool:
        """Delete a service."""
        pass

    @abstractmethod
    async def list_services(
        self, tenant_id: int, active_only: bool = False
    ) -> list[Service]:
        """List a tenant's services."""
        pass
