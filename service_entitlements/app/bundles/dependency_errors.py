"""
Mapping of failed Subscriptions Service lookups to dependency errors.
"""

from shared.errors import DependencyFailure
from .models import (
    SUBSCRIPTIONS_SERVICE_ENDPOINT,
    SUBSCRIPTIONS_SERVICE_NAME,
    DependencyErrorDetail,
    DependencyErrorResponse,
    SubscriptionLookupResult,
)


TRANSPORT_ERROR_MESSAGE = "Unexpected error while talking to Subs Service"
NON_200_MESSAGE = "Got back a non 200 status code from Subscriptions Service"


def map_dependency_failure(result: SubscriptionLookupResult,
                           endpoint: str = SUBSCRIPTIONS_SERVICE_ENDPOINT) -> DependencyErrorDetail:
    """Classify a failed lookup.

    A transport error wins over the status code; ``status`` then carries
    whatever status the client saw (0 when no response arrived).
    """
    if result.transport_error is not None:
        message = TRANSPORT_ERROR_MESSAGE
    elif result.status_code != 200:
        message = NON_200_MESSAGE
    else:
        raise ValueError("Lookup succeeded; nothing to map")

    return DependencyErrorDetail(
        dependency_failure=True,
        service=SUBSCRIPTIONS_SERVICE_NAME,
        status=result.status_code,
        endpoint=endpoint,
        message=message,
    )


def dependency_failure_response(result: SubscriptionLookupResult,
                                endpoint: str = SUBSCRIPTIONS_SERVICE_ENDPOINT) -> DependencyErrorResponse:
    return DependencyErrorResponse(error=map_dependency_failure(result, endpoint))


def raise_for_lookup(result: SubscriptionLookupResult,
                     endpoint: str = SUBSCRIPTIONS_SERVICE_ENDPOINT) -> None:
    """Raise ``DependencyFailure`` carrying the error envelope if the lookup failed."""
    if result.succeeded:
        return
    response = dependency_failure_response(result, endpoint)
    raise DependencyFailure(SUBSCRIPTIONS_SERVICE_NAME, response, message=response.error.message)
