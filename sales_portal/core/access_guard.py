"""
Route gating by identity state, role and permissions.

`evaluate_access` is re-run by the router every time the session changes or a
protected route is opened. Checks run from "no identity" towards the most
specific requirement and the first failing check decides the outcome.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional, Tuple

from sales_portal.constants import Role
from sales_portal.core.exceptions import (
    AccessDeniedError, AccountDeactivatedError, PermissionDeniedError, RoleDeniedError,
)
from sales_portal.core.identity import Identity

DEACTIVATED_MESSAGE = "Account is deactivated. Contact administrator."
ROLE_DENIED_MESSAGE = "Access denied. Insufficient privileges."
PERMISSION_DENIED_MESSAGE = "Access denied. Missing required permissions."


class AccessState(Enum):
    LOADING = "loading"
    UNAUTHENTICATED = "unauthenticated"
    DEACTIVATED = "deactivated"
    ROLE_DENIED = "role_denied"
    PERMISSION_DENIED = "permission_denied"
    AUTHORIZED = "authorized"


DENIAL_STATES = (AccessState.DEACTIVATED, AccessState.ROLE_DENIED, AccessState.PERMISSION_DENIED)


@dataclass(frozen=True)
class RouteRequirement:
    """Static requirement attached to a protected route. Role is an exact match, permissions are ANDed."""
    role: Optional[Role] = None
    permissions: Tuple[str, ...] = ()

    @classmethod
    def of(cls, role: Optional[Role] = None, permissions: Iterable[str] = ()) -> "RouteRequirement":
        return cls(role=role, permissions=tuple(permissions))


AUTHENTICATED_ONLY = RouteRequirement()


@dataclass(frozen=True)
class AccessDecision:
    state: AccessState
    message: Optional[str] = None
    redirect_to: Optional[str] = None
    return_to: Optional[str] = None
    missing_permissions: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_authorized(self) -> bool:
        return self.state is AccessState.AUTHORIZED

    @property
    def is_denied(self) -> bool:
        return self.state in DENIAL_STATES

    def raise_for_denial(self):
        """Raises the matching `AccessDeniedError` subclass for the three denial states."""
        if self.state is AccessState.DEACTIVATED:
            raise AccountDeactivatedError(self.message)
        if self.state is AccessState.ROLE_DENIED:
            raise RoleDeniedError(self.message)
        if self.state is AccessState.PERMISSION_DENIED:
            raise PermissionDeniedError(self.message, self.missing_permissions)
        if self.state is AccessState.UNAUTHENTICATED:
            raise AccessDeniedError("Sign in required.")


def evaluate_access(
        identity: Optional[Identity],
        requirement: RouteRequirement = AUTHENTICATED_ONLY,
        loading: bool = False,
        requested_path: Optional[str] = None,
        login_route: str = "/login",
) -> AccessDecision:
    if loading:
        return AccessDecision(AccessState.LOADING)

    if identity is None:
        return AccessDecision(
            AccessState.UNAUTHENTICATED,
            redirect_to=login_route,
            return_to=requested_path,
        )

    if not identity.is_active:
        return AccessDecision(AccessState.DEACTIVATED, message=DEACTIVATED_MESSAGE)

    if requirement.role is not None and identity.role != requirement.role:
        return AccessDecision(AccessState.ROLE_DENIED, message=ROLE_DENIED_MESSAGE)

    if requirement.permissions:
        missing = tuple(p for p in requirement.permissions if p not in identity.permissions)
        if missing:
            return AccessDecision(
                AccessState.PERMISSION_DENIED,
                message=PERMISSION_DENIED_MESSAGE,
                missing_permissions=missing,
            )

    return AccessDecision(AccessState.AUTHORIZED)
