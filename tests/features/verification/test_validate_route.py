from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from verification_provider.features.verification.routes.validate import get_verification_store
from verification_provider.features.verification.services.record_store import VerificationRecordStore
from verification_provider.features.verification.utils.clock import utc_now
from verification_provider.platform.exceptions import PersistenceError


@pytest.fixture
def override_store(test_app):
    """Point the validate route at a test double store."""

    def _override(store):
        test_app.dependency_overrides[get_verification_store] = lambda: store
        return store

    yield _override
    test_app.dependency_overrides.pop(get_verification_store, None)


class TestValidateRoute:
    def test_accepts_matching_code(self, client, override_store, store_factory, record_factory):
        override_store(store_factory([record_factory(code="123456", now=utc_now())]))

        response = client.post(
            "/api/v1/verification/validate", json={"email": "test@example.com", "code": "123456"}
        )

        assert response.status_code == 200
        payload = response.json()
        assert payload["status"] == "success"
        assert payload["data"] == {"valid": True}

    def test_accepts_pascal_case_body(self, client, override_store, store_factory, record_factory):
        override_store(store_factory([record_factory(code="123456", now=utc_now())]))

        response = client.post(
            "/api/v1/verification/validate", json={"Email": "test@example.com", "Code": "123456"}
        )

        assert response.status_code == 200

    def test_rejects_wrong_code(self, client, override_store, store_factory, record_factory):
        override_store(store_factory([record_factory(code="123456", now=utc_now())]))

        response = client.post(
            "/api/v1/verification/validate", json={"email": "test@example.com", "code": "000000"}
        )

        assert response.status_code == 400
        payload = response.json()
        assert payload["status"] == "error"
        assert payload["data"] == {"valid": False}

    def test_rejects_expired_code(self, client, override_store, store_factory, record_factory):
        override_store(store_factory([
            record_factory(code="123456", expires_in=timedelta(minutes=-1), now=utc_now())
        ]))

        response = client.post(
            "/api/v1/verification/validate", json={"email": "test@example.com", "code": "123456"}
        )

        assert response.status_code == 400

    def test_rejects_unknown_email(self, client, override_store, store_factory):
        override_store(store_factory())

        response = client.post(
            "/api/v1/verification/validate", json={"email": "nobody@example.com", "code": "123456"}
        )

        assert response.status_code == 400

    def test_missing_code_is_a_validation_error(self, client, override_store, store_factory):
        override_store(store_factory())

        response = client.post("/api/v1/verification/validate", json={"email": "test@example.com"})

        assert response.status_code == 422
        assert response.json()["message"] == "Validation failed"

    def test_store_failure_maps_to_503_without_details(self, client, override_store):
        store = MagicMock(spec=VerificationRecordStore)
        store.find_by_email = AsyncMock(side_effect=PersistenceError("find_by_email", "password=hunter2"))
        override_store(store)

        response = client.post(
            "/api/v1/verification/validate", json={"email": "test@example.com", "code": "123456"}
        )

        assert response.status_code == 503
        payload = response.json()
        assert payload["data"] == {"code": "PERSISTENCE_ERROR"}
        assert "hunter2" not in response.text
