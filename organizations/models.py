"""Model registration for the organizations app."""
from organizations.infrastructure.models import ApiKey, Organization  # noqa: F401
