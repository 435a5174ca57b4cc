import datetime

from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from typing import Optional, List

from sales_portal.core.models import User
from sales_portal.core.exceptions import UserNotFoundError, DatabaseError, FetchError, WriteError, ValidationError

def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()

def get_user_by_login_id(db: Session, login_id: str) -> Optional[User]:
    try:
        return db.query(User).filter(User.login_id == login_id).first()
    except SQLAlchemyError as e:
        raise FetchError(f"Could not look up user '{login_id}': {e}")

def get_all_users(db: Session) -> List[User]:
    try:
        return db.query(User).order_by(User.login_id).all()
    except SQLAlchemyError as e:
        raise FetchError(f"Could not load users: {e}")


def create_user(db: Session, login_id: str, password: str, display_name: str, email: str,
                role: str, permissions: List[str], territory_id: Optional[str] = None,
                company_id: Optional[str] = None, distributor_id: Optional[str] = None,
                store_id: Optional[str] = None) -> User:
    """
    Create a new user.
    Raises:
        ValidationError: If login ID or password is not provided.
        DatabaseError: If the user could not be created (e.g., login ID exists).
    """
    if not login_id:
        raise ValidationError("Login ID is required for creating a user.")
    if not password:
        raise ValidationError("Password is required for creating a user.")
    if not role:
        raise ValidationError("Role is required for creating a user.")

    existing_user = get_user_by_login_id(db, login_id)
    if existing_user:
        raise DatabaseError(f"User with login ID '{login_id}' already exists.")

    try:
        user = User(
            login_id=login_id, display_name=display_name, email=email, role=role,
            permissions=list(permissions), territory_id=territory_id, company_id=company_id,
            distributor_id=distributor_id, store_id=store_id,
        )
        user.set_password(password) # Hash password
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    except IntegrityError:
        db.rollback()
        # This typically means the login_id unique constraint was violated by a concurrent transaction
        raise WriteError(f"User with login ID '{login_id}' already exists (IntegrityError).")
    except Exception as e:
        db.rollback()
        raise WriteError(f"Could not create user '{login_id}': An unexpected error occurred: {e}")


def set_user_active(db: Session, user_id: int, is_active: bool) -> User:
    """
    Raises:
        UserNotFoundError: If the user with user_id is not found.
        WriteError: If the update fails.
    """
    user = get_user_by_id(db, user_id)
    if not user:
        raise UserNotFoundError(f"User with ID {user_id} not found.")
    try:
        user.is_active = is_active
        db.commit()
        db.refresh(user)
        return user
    except Exception as e:
        db.rollback()
        raise WriteError(f"Could not update user {user.login_id}: An unexpected error occurred: {e}")


def update_last_login(db: Session, user: User) -> User:
    try:
        user.last_login = datetime.datetime.now()
        db.commit()
        db.refresh(user)
        return user
    except Exception as e:
        db.rollback()
        raise WriteError(f"Could not record last login for {user.login_id}: {e}")


def any_users_exist(db: Session) -> bool:
    return db.query(User.id).first() is not None # Query for id is slightly more efficient
