"""
Defines the SQLAlchemy models for the application.

This module contains the database schema definitions using SQLAlchemy's
declarative base. It includes the `User`, `Lead` and `Visit` models.
"""
import logging

import bcrypt
import datetime
from sqlalchemy import String, Integer, Column, ForeignKey, Boolean, DateTime, Text, JSON
from sqlalchemy.orm import declarative_base, relationship

from sales_portal.constants import Role, LEAD_STATUS_NEW, DEFAULT_LEAD_PRIORITY

logger = logging.getLogger(__name__)
Base = declarative_base()

class User(Base):
    """
    Represents a user account that can sign in.

    Attributes:
        id (int): The primary key for the user.
        login_id (str): The unique login identifier (e.g. "admin001", "dist_north_01").
        password (str): The bcrypt hash of the user's password.
        role (str): One of the `Role` values.
        permissions (list[str]): Capability strings checked by route guards.
        is_active (bool): Inactive accounts cannot sign in and are denied on every route.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    login_id = Column(String, unique=True, nullable=False, index=True)
    password = Column(String, nullable=False)
    display_name = Column(String, nullable=False)
    email = Column(String, nullable=False, default="")
    role = Column(String, nullable=False, default=Role.SALES.value)
    permissions = Column(JSON, nullable=False, default=list)
    is_active = Column(Boolean, nullable=False, default=True)

    company_id = Column(String, nullable=True)
    distributor_id = Column(String, nullable=True)
    territory_id = Column(String, nullable=True)
    store_id = Column(String, nullable=True)

    last_login = Column(DateTime, nullable=True)
    created_date = Column(DateTime, nullable=False, default=datetime.datetime.now)
    updated_date = Column(DateTime, nullable=False, default=datetime.datetime.now, onupdate=datetime.datetime.now)

    def set_password(self, plain_password: str):
        password_bytes = plain_password.encode('utf-8')
        salt = bcrypt.gensalt()
        self.password = bcrypt.hashpw(password_bytes, salt).decode('utf-8')

    def check_password(self, plain_password: str) -> bool:
        if not self.password:
            return False
        password_bytes = plain_password.encode('utf-8')
        hashed_password_bytes = self.password.encode('utf-8')
        try:
            return bcrypt.checkpw(password_bytes, hashed_password_bytes)
        except ValueError:
            # Stored value is not a bcrypt hash
            logger.error(f"Stored password for user '{self.login_id}' is not a valid bcrypt hash.")
            return False

    def __repr__(self):
        return f"<User(id={self.id}, login_id='{self.login_id}', role='{self.role}')>"

class Lead(Base):
    """A prospective optician account tracked through the lead status lifecycle."""
    __tablename__ = "leads"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    optician_name = Column(String, nullable=False)
    contact_person_name = Column(String, nullable=False)
    phone_number = Column(String, nullable=False)
    email = Column(String, nullable=False)
    address = Column(Text, nullable=False)
    gst_number = Column(String, nullable=False)
    week_off = Column(String, nullable=False)

    status = Column(String, nullable=False, default=LEAD_STATUS_NEW, index=True)
    priority = Column(String, nullable=False, default=DEFAULT_LEAD_PRIORITY)
    source = Column(String, nullable=False)
    business_type = Column(String, nullable=False)

    sales_staff_id = Column(String, nullable=False, index=True) # Owner's login_id
    sales_staff_name = Column(String, nullable=False)
    territory_id = Column(String, nullable=True)

    total_visits = Column(Integer, nullable=False, default=0)
    last_visit_date = Column(DateTime, nullable=True)
    next_follow_up_date = Column(DateTime, nullable=True)
    conversion_date = Column(DateTime, nullable=True)

    current_suppliers = Column(JSON, nullable=False, default=list)
    monthly_volume = Column(Integer, nullable=True)
    notes = Column(Text, nullable=True)
    tags = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime, nullable=False, default=datetime.datetime.now, index=True)
    created_by = Column(String, nullable=False)
    updated_at = Column(DateTime, nullable=False, default=datetime.datetime.now, onupdate=datetime.datetime.now)
    updated_by = Column(String, nullable=False)

    visits = relationship("Visit", back_populates="lead", order_by="Visit.visit_date.desc()", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Lead(id={self.id}, optician_name='{self.optician_name}', status='{self.status}')>"

class Visit(Base):
    __tablename__ = "visits"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    lead_id = Column(Integer, ForeignKey("leads.id"), nullable=False, index=True)
    visit_date = Column(DateTime, nullable=False, default=datetime.datetime.now)
    notes = Column(Text, nullable=False, default="")
    interest_level = Column(String, nullable=False)
    next_action = Column(String, nullable=False)
    next_action_date = Column(DateTime, nullable=True)
    sales_staff_id = Column(String, nullable=False)
    sales_staff_name = Column(String, nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.datetime.now)

    lead = relationship("Lead", back_populates="visits")

    def __repr__(self):
        return f"<Visit(id={self.id}, lead_id={self.lead_id}, visit_date='{self.visit_date}')>"
