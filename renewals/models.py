"""Model registration for the renewals app."""
from renewals.infrastructure.models import RenewalRequest  # noqa: F401
