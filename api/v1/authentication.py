"""
Access to the authenticated actor inside API views.
"""
from rest_framework.exceptions import NotAuthenticated
from rest_framework.request import Request

from core.domain.value_objects import Actor


def get_actor(request: Request) -> Actor:
    """
    Return the actor resolved by ``APIKeyAuthenticationMiddleware``.

    Raises:
        NotAuthenticated: If no API key was resolved for this request
    """
    actor = getattr(request, "actor", None)
    if actor is None:
        raise NotAuthenticated("Missing API key. Provide X-API-Key header.")
    return actor
