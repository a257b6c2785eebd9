"""
Renewal request domain services.
"""
import uuid

from core.domain.exceptions import InvalidRequestStatusError, NotManagedError
from core.domain.value_objects import RequestStatus
from organizations.domain.organization import Organization
from renewals.domain.renewal_request import RenewalRequest


class RenewalDecisionPolicy:
    """
    Decides whether a TOP organization may approve or reject a request.

    A TOP decides the PENDING requests of its own UNITs. A reseller
    managed TOP decides its own request once the reseller has quoted it.
    """

    @staticmethod
    def check(deciding_org_id: uuid.UUID, requester: Organization, request: RenewalRequest) -> None:
        """
        Validate a decision.

        The parent TOP of the requester decides from PENDING, with no
        prior quote required. A reseller managed TOP has no parent, so it
        decides its own request, and only once the reseller has QUOTED it.

        Args:
            deciding_org_id: TOP organization approving or rejecting
            requester: Organization that raised the request
            request: Request being decided

        Raises:
            NotManagedError: If the TOP has no say over the request
            InvalidRequestStatusError: If the request is not in a decidable status
        """
        if requester.parent_id == deciding_org_id:
            expected = RequestStatus.PENDING
        elif requester.id == deciding_org_id and requester.is_reseller_managed:
            expected = RequestStatus.QUOTED
        else:
            raise NotManagedError("You do not manage this organization.")

        if request.status.is_terminal:
            raise InvalidRequestStatusError()
        if request.status != expected:
            raise InvalidRequestStatusError(
                f"Request must be {expected.value} to be decided, it is {request.status.value}."
            )

    @staticmethod
    def can_read_quote(reader_org_id: uuid.UUID, requester: Organization) -> bool:
        """The requester, its parent TOP and its reseller may read a quote."""
        return reader_org_id in {requester.id, requester.parent_id, requester.reseller_id}
