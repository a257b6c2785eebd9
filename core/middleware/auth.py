"""
API key authentication middleware.

Resolves the ``X-API-Key`` header to the acting organization. The core
trusts the resulting ``request.actor`` as already authenticated.
"""

import logging
from typing import Optional

from django.http import HttpRequest, HttpResponse, JsonResponse
from django.utils.deprecation import MiddlewareMixin

from core.domain.value_objects import Actor, OrgKind
from organizations.infrastructure.models import ApiKey, hash_api_key

logger = logging.getLogger(__name__)


def _unauthorized(code: str, message: str) -> JsonResponse:
    return JsonResponse({"error": {"code": code, "message": message}}, status=401)


class APIKeyAuthenticationMiddleware(MiddlewareMixin):
    """
    Middleware for API key authentication.

    This middleware:
    1. Validates API keys for the versioned API (/api/v1/*)
    2. Stores the organization and its Actor on the request
    3. Returns 401 Unauthorized if authentication fails
    """

    protected_prefix = "/api/v1/"

    def process_request(self, request: HttpRequest) -> Optional[HttpResponse]:
        """
        Process request and validate authentication.

        Args:
            request: HTTP request

        Returns:
            HttpResponse with 401 if authentication fails, None otherwise
        """
        if not request.path.startswith(self.protected_prefix):
            return None

        api_key = request.headers.get("X-API-Key") or request.headers.get(
            "Authorization", ""
        ).replace("Bearer ", "")

        if not api_key:
            return _unauthorized("MISSING_API_KEY", "Missing API key. Provide X-API-Key header.")

        # pylint: disable=no-member
        api_key_obj = (
            ApiKey.objects.select_related("organization")
            .filter(key_hash=hash_api_key(api_key))
            .first()
        )
        if not api_key_obj:
            logger.warning("Invalid API key attempted: %s...", api_key[:8])
            return _unauthorized("INVALID_API_KEY", "Invalid API key")

        if not api_key_obj.is_valid():
            logger.warning("Expired API key attempted: %s...", api_key[:8])
            return _unauthorized("EXPIRED_API_KEY", "API key expired")

        api_key_obj.mark_used()

        organization = api_key_obj.organization
        request.organization = organization  # type: ignore
        request.api_key = api_key_obj  # type: ignore
        request.actor = Actor(org_id=organization.id, kind=OrgKind(organization.kind))  # type: ignore
        return None
