"""
Integration tests for device API endpoints.
"""

import uuid
from datetime import datetime, timedelta
from datetime import timezone as dt_timezone

import pytest
from django.urls import reverse
from django.utils import timezone

from core.domain.value_objects import DeviceStatus
from organizations.infrastructure.models import ApiKey


@pytest.mark.django_db
@pytest.mark.integration
class TestAPIKeyAuthentication:
    """Integration tests for the API key middleware."""

    def test_missing_api_key(self, api_client):
        """Test request without an API key."""
        response = api_client.get(reverse("list-devices"))

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "MISSING_API_KEY"

    def test_invalid_api_key(self, api_client):
        """Test request with an unknown API key."""
        response = api_client.get(reverse("list-devices"), HTTP_X_API_KEY="not-a-real-key")

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "INVALID_API_KEY"

    def test_expired_api_key(self, api_client, orgs, api_key_for):
        """Test request with an expired API key."""
        raw_key = api_key_for(orgs["hq"])
        # pylint: disable=no-member
        ApiKey.objects.filter(organization_id=orgs["hq"].id).update(
            expires_at=timezone.now() - timedelta(days=1)
        )

        response = api_client.get(reverse("list-devices"), HTTP_X_API_KEY=raw_key)

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "EXPIRED_API_KEY"

    def test_bearer_header_accepted(self, api_client, orgs, api_key_for):
        """Test the Authorization header as an alternative."""
        raw_key = api_key_for(orgs["hq"])

        response = api_client.get(reverse("list-devices"), HTTP_AUTHORIZATION=f"Bearer {raw_key}")

        assert response.status_code == 200


@pytest.mark.django_db
@pytest.mark.integration
class TestDeviceAPI:
    """Integration tests for device endpoints."""

    def test_bulk_renew(self, api_client, orgs, make_device, api_key_for):
        """Test renewing managed devices and skipping the rest."""
        expiry = timezone.now() + timedelta(days=10)
        device = make_device(orgs["london"], DeviceStatus.EXPIRING_SOON, expiry)
        foreign = make_device(orgs["other_top"], expiry_date=expiry)

        response = api_client.post(
            reverse("bulk-renew"),
            {"device_ids": [str(device.id), str(foreign.id), str(uuid.uuid4())], "years": 2},
            HTTP_X_API_KEY=api_key_for(orgs["hq"]),
            format="json",
        )

        assert response.status_code == 200
        data = response.json()
        assert data["updated_count"] == 1
        assert data["updated"][0]["id"] == str(device.id)
        assert data["updated"][0]["status"] == "ACTIVE"

    def test_bulk_renew_validation(self, api_client, orgs, api_key_for):
        """Test an empty device list."""
        response = api_client.post(
            reverse("bulk-renew"),
            {"device_ids": []},
            HTTP_X_API_KEY=api_key_for(orgs["hq"]),
            format="json",
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_bulk_renew_years_above_limit(self, api_client, orgs, make_device, api_key_for):
        """Test an oversized renewal term is a validation error."""
        device = make_device(orgs["london"])

        response = api_client.post(
            reverse("bulk-renew"),
            {"device_ids": [str(device.id)], "years": 9000},
            HTTP_X_API_KEY=api_key_for(orgs["hq"]),
            format="json",
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_bulk_renew_calendar_overflow(self, api_client, orgs, make_device, api_key_for):
        """Test an expiry pushed past year 9999 is a validation error, not a server error."""
        device = make_device(orgs["london"], expiry_date=datetime(9995, 6, 1, tzinfo=dt_timezone.utc))

        response = api_client.post(
            reverse("bulk-renew"),
            {"device_ids": [str(device.id)], "years": 5},
            HTTP_X_API_KEY=api_key_for(orgs["hq"]),
            format="json",
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_bulk_renew_forbidden_for_unit(self, api_client, orgs, make_device, api_key_for):
        """Test UNIT organizations cannot bulk renew."""
        device = make_device(orgs["london"])

        response = api_client.post(
            reverse("bulk-renew"),
            {"device_ids": [str(device.id)]},
            HTTP_X_API_KEY=api_key_for(orgs["london"]),
            format="json",
        )

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "ACTOR_KIND_NOT_ALLOWED"

    def test_co_term(self, api_client, orgs, make_device, api_key_for):
        """Test aligning devices to an explicit date."""
        devices = [make_device(orgs["london"]), make_device(orgs["manchester"])]

        response = api_client.post(
            reverse("co-term"),
            {"device_ids": [str(d.id) for d in devices], "target_date": "2030-06-30T00:00:00Z"},
            HTTP_X_API_KEY=api_key_for(orgs["hq"]),
            format="json",
        )

        assert response.status_code == 200
        assert response.json()["updated_count"] == 2
        assert {d["expiry_date"] for d in response.json()["updated"]} == {"2030-06-30T00:00:00Z"}

    def test_grace_token(self, api_client, orgs, make_device, api_key_for):
        """Test issuing a grace token to an expired device."""
        device = make_device(orgs["london"], DeviceStatus.EXPIRED, timezone.now() - timedelta(days=1))

        response = api_client.post(
            reverse("grace-token", kwargs={"device_id": device.id}),
            HTTP_X_API_KEY=api_key_for(orgs["hq"]),
        )

        assert response.status_code == 200
        assert response.json()["grace_token_expiry"] is not None

    def test_grace_token_unknown_device(self, api_client, orgs, api_key_for):
        """Test 404 for a device that does not exist."""
        response = api_client.post(
            reverse("grace-token", kwargs={"device_id": uuid.uuid4()}),
            HTTP_X_API_KEY=api_key_for(orgs["hq"]),
        )

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "DEVICE_NOT_FOUND"

    def test_grace_token_foreign_device(self, api_client, orgs, make_device, api_key_for):
        """Test 403 for a device outside the caller's organizations."""
        device = make_device(orgs["other_top"], DeviceStatus.EXPIRED, timezone.now() - timedelta(days=1))

        response = api_client.post(
            reverse("grace-token", kwargs={"device_id": device.id}),
            HTTP_X_API_KEY=api_key_for(orgs["hq"]),
        )

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "NOT_MANAGED"

    def test_grace_token_active_device(self, api_client, orgs, make_device, api_key_for):
        """Test 409 for a device that is not EXPIRED."""
        device = make_device(orgs["london"], expiry_date=timezone.now() + timedelta(days=100))

        response = api_client.post(
            reverse("grace-token", kwargs={"device_id": device.id}),
            HTTP_X_API_KEY=api_key_for(orgs["hq"]),
        )

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "INVALID_DEVICE_STATUS"

    def test_list_devices(self, api_client, orgs, make_device, api_key_for):
        """Test listing devices in scope ordered by expiry."""
        now = timezone.now()
        late = make_device(orgs["hq"], expiry_date=now + timedelta(days=300))
        soon = make_device(orgs["london"], DeviceStatus.EXPIRING_SOON, now + timedelta(days=5))
        make_device(orgs["other_top"])

        response = api_client.get(reverse("list-devices"), HTTP_X_API_KEY=api_key_for(orgs["hq"]))

        assert response.status_code == 200
        data = response.json()
        assert [d["id"] for d in data] == [str(soon.id), str(late.id)]
        assert data[0]["organization_name"] == "London Flagship"
        assert data[0]["active_renewal_request"] is False

    def test_list_devices_for_reseller_client(self, api_client, orgs, make_device, api_key_for):
        """Test narrowing a reseller's list to one client."""
        device = make_device(orgs["client_unit"])

        response = api_client.get(
            reverse("list-devices"),
            {"client_id": str(orgs["client"].id)},
            HTTP_X_API_KEY=api_key_for(orgs["reseller"]),
        )

        assert response.status_code == 200
        assert [d["id"] for d in response.json()] == [str(device.id)]

    def test_list_devices_bad_client_id(self, api_client, orgs, api_key_for):
        """Test a malformed client_id."""
        response = api_client.get(
            reverse("list-devices"),
            {"client_id": "not-a-uuid"},
            HTTP_X_API_KEY=api_key_for(orgs["reseller"]),
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"
