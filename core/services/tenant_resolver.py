# =============================================================================
# core/services/tenant_resolver.py - College (Tenant) Resolution
# =============================================================================
# Works out which college a request belongs to. Resolvers are tried in
# order and the first non-empty answer wins:
#   1. college_id carried by the authenticated session (JWT claims)
#   2. college_id derived from the request (header or subdomain)
#   3. college_id stored on the student's profile row
#
# The profile lookup only runs when the first two come back empty, since the
# college isn't always copied onto the session yet when a student signs up.
# =============================================================================

import logging
from dataclasses import dataclass
from typing import Callable

from app.exceptions import TenantNotFoundError
from lib.supabase_client import SupabaseClient, SupabaseClientError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TenantContext:
    """Everything the resolvers may look at for one request."""
    user_id: str
    session_tenant_id: str | None = None
    request_tenant_id: str | None = None


Resolver = Callable[[TenantContext], str | None]


def _clean(value: object) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def session_tenant(context: TenantContext) -> str | None:
    """College id embedded in the authenticated user's token."""
    return _clean(context.session_tenant_id)


def request_tenant(context: TenantContext) -> str | None:
    """College id derived from the request itself."""
    return _clean(context.request_tenant_id)


def make_profile_resolver(repository=SupabaseClient) -> Resolver:
    """
    Build a resolver that reads profiles.college_id for the user.

    Lookup failures are logged and treated as "no answer" so the caller
    reports a missing college rather than a server error.
    """

    def profile_tenant(context: TenantContext) -> str | None:
        logger.info(f"Fetching college_id from profiles for user: {context.user_id}")
        try:
            college_id = repository.fetch_profile_college_id(context.user_id)
        except SupabaseClientError as e:
            logger.error(f"Error fetching profile for user {context.user_id}: {e}")
            return None
        logger.info(f"College ID from profile: {college_id}")
        return _clean(college_id)

    return profile_tenant


class TenantResolver:
    """
    Ordered chain of resolver functions.

    Example:
        resolver = TenantResolver([session_tenant, request_tenant])
        college_id = resolver.resolve(TenantContext(user_id="u1", session_tenant_id="c1"))
    """

    def __init__(self, resolvers: list[Resolver]):
        self.resolvers = list(resolvers)

    @classmethod
    def default(cls, repository=SupabaseClient) -> "TenantResolver":
        """Session claim, then request tenant, then profile lookup."""
        return cls([session_tenant, request_tenant, make_profile_resolver(repository)])

    def resolve(self, context: TenantContext) -> str:
        """
        Return the first non-empty college id.

        Raises:
            TenantNotFoundError: no resolver produced a value
        """
        for resolver in self.resolvers:
            college_id = resolver(context)
            if college_id:
                return college_id

        logger.error(f"College ID not found for student: {context.user_id}")
        raise TenantNotFoundError(context.user_id)
