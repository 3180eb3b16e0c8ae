"""Unit tests for storage and notifier interface abstract classes."""

import pytest

from bizdesk.core.interfaces import (
    ICatalogStore,
    IClientStore,
    IEmailTransport,
    INotifier,
    IReminderStore,
    ISalesStore,
    IUserStore,
)


@pytest.mark.parametrize(
    "interface",
    [IReminderStore, IClientStore, IUserStore, ICatalogStore, ISalesStore, INotifier, IEmailTransport],
)
def test_is_abstract_class(interface):
    with pytest.raises(TypeError, match="Can't instantiate abstract class"):
        interface()


class TestIReminderStoreInterface:
    def test_sweep_operations_defined(self):
        """The sweep needs a cross-tenant load and a partial update."""
        assert {"find_pending", "update"} <= set(IReminderStore.__abstractmethods__)

    def test_crud_operations_defined(self):
        expected = {"get", "create", "delete", "list_reminders", "list_upcoming"}
        assert expected <= set(IReminderStore.__abstractmethods__)


class TestICatalogStoreInterface:
    def test_product_operations_defined(self):
        expected = {
            "create_product",
            "get_product",
            "find_duplicate_product",
            "update_product",
            "delete_product",
            "list_products",
            "list_low_stock",
            "adjust_stock",
        }
        assert expected <= set(ICatalogStore.__abstractmethods__)

    def test_service_operations_defined(self):
        expected = {
            "create_service",
            "get_service",
            "update_service",
            "delete_service",
            "list_services",
        }
        assert expected <= set(ICatalogStore.__abstractmethods__)


class TestINotifierInterface:
    def test_operations_defined(self):
        expected = {"notify_user_of_reminder", "notify_client_of_reminder", "notify_completion"}
        assert set(INotifier.__abstractmethods__) == expected


class TestISalesStoreInterface:
    def test_operations_defined(self):
        expected = {
            "create_sale",
            "get_sale",
            "update_sale",
            "delete_sale",
            "delete_all_sales",
            "list_sales",
            "sold_quantities",
        }
        assert set(ISalesStore.__abstractmethods__) == expected
