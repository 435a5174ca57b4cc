"""
The authenticated subject of a session.

`Identity` is a frozen value built from a `User` row at sign-in. It never holds
a reference to the ORM object, so it stays valid after the database session
that produced it has been closed and can be written to client storage.
"""
import datetime
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Optional

from sales_portal.constants import Role, ROLE_DISPLAY_NAMES
from sales_portal.core.exceptions import SessionDataError

_REQUIRED_KEYS = ("login_id", "display_name", "email", "role", "permissions", "is_active")


@dataclass(frozen=True)
class Identity:
    login_id: str
    display_name: str
    email: str
    role: Role
    permissions: FrozenSet[str] = field(default_factory=frozenset)
    is_active: bool = True
    user_id: Optional[int] = None
    company_id: Optional[str] = None
    distributor_id: Optional[str] = None
    territory_id: Optional[str] = None
    store_id: Optional[str] = None
    last_login: Optional[datetime.datetime] = None

    def has_permission(self, capability: str) -> bool:
        return capability in self.permissions

    def has_role(self, role: Role) -> bool:
        return self.role == role

    @property
    def role_display_name(self) -> str:
        return ROLE_DISPLAY_NAMES.get(self.role, self.role.value)

    @classmethod
    def from_user(cls, user) -> "Identity":
        """Builds an identity from a `User` model instance."""
        return cls(
            login_id=user.login_id,
            display_name=user.display_name or user.login_id,
            email=user.email or "",
            role=Role(user.role),
            permissions=frozenset(user.permissions or []),
            is_active=bool(user.is_active),
            user_id=user.id,
            company_id=user.company_id,
            distributor_id=user.distributor_id,
            territory_id=user.territory_id,
            store_id=user.store_id,
            last_login=user.last_login,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "login_id": self.login_id,
            "display_name": self.display_name,
            "email": self.email,
            "role": self.role.value,
            "permissions": sorted(self.permissions),
            "is_active": self.is_active,
            "user_id": self.user_id,
            "company_id": self.company_id,
            "distributor_id": self.distributor_id,
            "territory_id": self.territory_id,
            "store_id": self.store_id,
            "last_login": self.last_login.isoformat() if self.last_login else None,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "Identity":
        """
        Rebuilds an identity from `to_dict()` output.

        Raises:
            SessionDataError: If `data` is not a mapping, misses a required key,
                names an unknown role, or carries values of the wrong type.
        """
        if not isinstance(data, dict):
            raise SessionDataError(f"Session record must be a mapping, got {type(data).__name__}.")
        missing = [key for key in _REQUIRED_KEYS if key not in data]
        if missing:
            raise SessionDataError(f"Session record is missing keys: {', '.join(missing)}.")

        try:
            role = Role(data["role"])
        except ValueError:
            raise SessionDataError(f"Session record has unknown role '{data['role']}'.")

        permissions = data["permissions"]
        if not isinstance(permissions, (list, tuple)) or not all(isinstance(p, str) for p in permissions):
            raise SessionDataError("Session record permissions must be a list of strings.")
        if not isinstance(data["is_active"], bool):
            raise SessionDataError("Session record 'is_active' must be a boolean.")
        if not isinstance(data["login_id"], str) or not data["login_id"]:
            raise SessionDataError("Session record 'login_id' must be a non-empty string.")

        last_login = None
        if data.get("last_login"):
            try:
                last_login = datetime.datetime.fromisoformat(data["last_login"])
            except (TypeError, ValueError):
                raise SessionDataError("Session record 'last_login' is not an ISO timestamp.")

        user_id = data.get("user_id")
        if user_id is not None and not isinstance(user_id, int):
            raise SessionDataError("Session record 'user_id' must be an integer.")

        return cls(
            login_id=data["login_id"],
            display_name=str(data["display_name"]),
            email=str(data["email"]),
            role=role,
            permissions=frozenset(permissions),
            is_active=data["is_active"],
            user_id=user_id,
            company_id=data.get("company_id"),
            distributor_id=data.get("distributor_id"),
            territory_id=data.get("territory_id"),
            store_id=data.get("store_id"),
            last_login=last_login,
        )
