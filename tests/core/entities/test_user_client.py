"""Tests for user and client entities."""

import pytest
from pydantic import ValidationError

from bizdesk.core.entities.client import Client, ClientType
from bizdesk.core.entities.user import User, normalize_email


class TestNormalizeEmail:
    def test_trims_and_lowercases(self):
        assert normalize_email("  Ama@Example.COM ") == "ama@example.com"

    @pytest.mark.parametrize("value", ["", "ama", "ama@", "@example.com", "ama@example"])
    def test_rejects_malformed(self, value):
        with pytest.raises(ValueError):
            normalize_email(value)


class TestUser:
    def test_email_normalized(self):
        assert User(name="Ama", email="AMA@example.com").email == "ama@example.com"

    def test_name_required(self):
        with pytest.raises(ValidationError):
            User(name="", email="ama@example.com")

    def test_display_name_prefers_business(self, sample_user):
        assert sample_user.display_name == "Ama's Salon"
        assert sample_user.model_copy(update={"business_name": None}).display_name == "Ama Owusu"


class TestClient:
    def test_defaults(self):
        client = Client(tenant_id=1, name="Kofi", email="kofi@example.com", business_type="retail")
        assert client.client_type == ClientType.OTHER
        assert client.notes == ""

    def test_bad_email_rejected(self):
        with pytest.raises(ValidationError):
            Client(tenant_id=1, name="Kofi", email="kofi", business_type="retail")
