import logging
from typing import Optional, List, Iterable
from sqlalchemy.orm import Session
import re # For regex-based validation

from sales_portal.core.models import User
from sales_portal.core.exceptions import UserNotFoundError, ValidationError, DatabaseError
from sales_portal.data import crud_users
from sales_portal.constants import Role, ALL_PERMISSIONS, DEFAULT_ROLE_PERMISSIONS

logger = logging.getLogger("sales_portal")
# Login ID validation constants
MIN_LOGIN_ID_LENGTH = 3
MAX_LOGIN_ID_LENGTH = 30
# Alphanumeric plus underscore, hyphen and period; starts and ends with an alphanumeric character.
LOGIN_ID_REGEX = re.compile(r"^[a-zA-Z0-9][a-zA-Z0-9_.-]*[a-zA-Z0-9]$")
EMAIL_REGEX = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

# Password validation constants
MIN_PASSWORD_LENGTH = 6


def default_permissions_for_role(role: Role) -> List[str]:
    return list(DEFAULT_ROLE_PERMISSIONS.get(Role(role), []))


class UserService:
    def _validate_login_id(self, login_id: str):
        if not login_id:
            raise ValidationError("Login ID cannot be empty.")
        if not (MIN_LOGIN_ID_LENGTH <= len(login_id) <= MAX_LOGIN_ID_LENGTH):
            raise ValidationError(f"Login ID must be between {MIN_LOGIN_ID_LENGTH} and {MAX_LOGIN_ID_LENGTH} characters long.")
        if not LOGIN_ID_REGEX.match(login_id):
            raise ValidationError("Login ID can only contain letters, numbers, underscores, hyphens, or periods, and must start/end with a letter or number.")

    def _validate_password(self, password: str):
        if not password:
            raise ValidationError("Password cannot be empty.")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long.")

    def _validate_role(self, role) -> Role:
        if not role:
            raise ValidationError("Role cannot be empty.")
        try:
            return Role(role)
        except ValueError:
            valid_roles = ", ".join(r.value for r in Role)
            raise ValidationError(f"Invalid user role: '{role}'. Valid roles are: {valid_roles}.")

    def _validate_permissions(self, permissions: Iterable[str]) -> List[str]:
        cleaned = []
        for permission in permissions:
            if permission not in ALL_PERMISSIONS:
                raise ValidationError(f"Unknown permission: '{permission}'.")
            if permission not in cleaned:
                cleaned.append(permission)
        return cleaned

    def get_user_by_id(self, db: Session, user_id: int) -> User:
        user = crud_users.get_user_by_id(db, user_id)
        if not user:
            raise UserNotFoundError(f"User with ID {user_id} not found.")
        return user

    def get_all_users(self, db: Session) -> List[User]:
        return crud_users.get_all_users(db)

    def any_users_exist(self, db: Session) -> bool:
        return crud_users.any_users_exist(db)

    def create_user(self, db: Session, login_id: str, password: str, display_name: str, email: str,
                    role=Role.SALES, permissions: Optional[Iterable[str]] = None,
                    territory_id: Optional[str] = None) -> User:
        """
        Creates an account. Without an explicit permission list the role's
        default permissions are granted.
        """
        login_id = login_id.strip() if login_id else "" # Clean login ID first
        display_name = display_name.strip() if display_name else ""
        email = email.strip() if email else ""
        self._validate_login_id(login_id)
        self._validate_password(password)
        role = self._validate_role(role)
        if not display_name:
            raise ValidationError("Display name cannot be empty.")
        if email and not EMAIL_REGEX.match(email):
            raise ValidationError(f"'{email}' is not a valid email address.")
        granted = self._validate_permissions(permissions) if permissions is not None else default_permissions_for_role(role)

        try:
            logger.info(f"Attempting to create new user '{login_id}' with role '{role.value}'.")
            return crud_users.create_user(
                db, login_id, password, display_name, email, role.value, granted,
                territory_id=territory_id.strip() if territory_id else None,
            )
        except DatabaseError as e:
            raise e
        except Exception as e_unhandled: # Catch other unexpected issues from CRUD
            raise DatabaseError(f"An unexpected error occurred while creating user in database: {e_unhandled}")

    def deactivate_user(self, db: Session, user_id: int, current_acting_user_id: Optional[int] = None) -> User:
        user = self.get_user_by_id(db, user_id)
        if user.id == current_acting_user_id:
            raise ValidationError("Users cannot deactivate their own account.")
        if not user.is_active:
            return user # Already inactive
        logger.info(f"Deactivating user '{user.login_id}' (ID: {user.id}) by user ID {current_acting_user_id}.")
        return crud_users.set_user_active(db, user_id, False)

    def reactivate_user(self, db: Session, user_id: int) -> User:
        user = self.get_user_by_id(db, user_id)
        if user.is_active:
            return user # Already active
        logger.info(f"Reactivating user '{user.login_id}' (ID: {user.id}).")
        return crud_users.set_user_active(db, user_id, True)
