"""
Unit tests for dependency error mapping.
"""

import httpx
import pytest

from service_entitlements.app.bundles.dependency_errors import (
    NON_200_MESSAGE,
    TRANSPORT_ERROR_MESSAGE,
    dependency_failure_response,
    map_dependency_failure,
    raise_for_lookup,
)
from service_entitlements.app.bundles.models import SubscriptionLookupResult
from shared.errors import DependencyFailure


class TestMapDependencyFailure:
    """Test cases for map_dependency_failure."""

    def test_non_200_status(self):
        detail = map_dependency_failure(SubscriptionLookupResult(status_code=503))

        assert detail.dependency_failure is True
        assert detail.service == "Subscriptions Service"
        assert detail.status == 503
        assert detail.endpoint == "https://subscription.api.redhat.com"
        assert detail.message == "Got back a non 200 status code from Subscriptions Service"

    def test_transport_error_wins_over_status(self):
        result = SubscriptionLookupResult(status_code=503, transport_error=RuntimeError("Sub Failure"))

        detail = map_dependency_failure(result)

        assert detail.status == 503
        assert detail.message == "Unexpected error while talking to Subs Service"

    def test_transport_error_without_response(self):
        result = SubscriptionLookupResult(status_code=0, transport_error=httpx.ConnectError("refused"))

        detail = map_dependency_failure(result)

        assert detail.status == 0
        assert detail.message == TRANSPORT_ERROR_MESSAGE

    def test_transport_error_on_200(self):
        result = SubscriptionLookupResult(status_code=200, transport_error=ValueError("bad body"))

        detail = map_dependency_failure(result)

        assert detail.status == 200
        assert detail.message == TRANSPORT_ERROR_MESSAGE

    def test_custom_endpoint(self):
        detail = map_dependency_failure(SubscriptionLookupResult(status_code=404), endpoint="https://subs.stage")

        assert detail.endpoint == "https://subs.stage"
        assert detail.message == NON_200_MESSAGE

    def test_successful_lookup_is_not_mappable(self):
        with pytest.raises(ValueError):
            map_dependency_failure(SubscriptionLookupResult(status_code=200, skus=("MCT3691",)))

    def test_envelope_shape(self):
        response = dependency_failure_response(SubscriptionLookupResult(status_code=503))

        assert response.model_dump() == {
            "error": {
                "dependency_failure": True,
                "service": "Subscriptions Service",
                "status": 503,
                "endpoint": "https://subscription.api.redhat.com",
                "message": "Got back a non 200 status code from Subscriptions Service",
            }
        }


class TestRaiseForLookup:
    """Test cases for raise_for_lookup."""

    def test_success_does_not_raise(self):
        raise_for_lookup(SubscriptionLookupResult(status_code=200, skus=()))

    def test_failure_raises_with_envelope(self):
        with pytest.raises(DependencyFailure) as exc_info:
            raise_for_lookup(SubscriptionLookupResult(status_code=500))

        exc = exc_info.value
        assert exc.status_code == 500
        assert exc.service == "Subscriptions Service"
        assert exc.detail.error.status == 500
        assert exc.detail.error.message == NON_200_MESSAGE
