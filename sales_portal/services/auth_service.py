import logging
from typing import Optional

from sqlalchemy.orm import Session

from sales_portal.data import crud_users # Direct DAO access for this specific need
from sales_portal.core.identity import Identity
from sales_portal.core.exceptions import InvalidCredentialsError, ValidationError, DatabaseError

logger = logging.getLogger("sales_portal")
class AuthService:
    @staticmethod
    def authenticate_user(db: Session, login_id: str, password: str) -> Identity:
        """
        Verify a login ID and password against the user store.

        Args:
            db (Session): The database session.
            login_id (str): The login identifier to authenticate.
            password (str): The plain password to verify against the stored bcrypt hash.

        Returns:
            Identity: A detached identity for the authenticated user.

        Raises:
            ValidationError: If login ID or password is not provided.
            InvalidCredentialsError: If the user is unknown, the password is wrong or the account is inactive.
                The three cases carry the same message.
        """
        if not login_id:
            raise ValidationError("Login ID is required.")

        if not password:
            raise ValidationError("Password is required.")

        user = crud_users.get_user_by_login_id(db, login_id)

        if not user:
            logger.warning(f"Failed login attempt for login ID: '{login_id}'. Reason: User not found.")
            raise InvalidCredentialsError()

        if not user.check_password(password):
            logger.warning(f"Failed login attempt for login ID: '{login_id}'. Reason: Invalid password.")
            raise InvalidCredentialsError()

        if not user.is_active:
            logger.warning(f"Failed login attempt for login ID: '{login_id}'. Reason: Account is inactive.")
            raise InvalidCredentialsError()

        try:
            crud_users.update_last_login(db, user)
        except DatabaseError as e:
            # Sign-in still succeeds; only the audit timestamp is lost
            logger.error(f"Could not record last login for '{login_id}': {e.message}")

        logger.info(f"User '{user.login_id}' (Role: {user.role}) authenticated successfully.")
        return Identity.from_user(user)

    @staticmethod
    def load_identity(db: Session, login_id: str) -> Optional[Identity]:
        """Current stored state of an account, or None if it no longer exists."""
        user = crud_users.get_user_by_login_id(db, login_id)
        if not user:
            return None
        return Identity.from_user(user)
