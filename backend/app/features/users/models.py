"""
User-related models.

Models:
- User: Athlete belonging to one client (tenant)
"""

from datetime import datetime

from sqlalchemy import Column, String, DateTime, Integer, Float, ForeignKey, Text
from sqlalchemy.orm import relationship

from app.models.base import Base


class User(Base):
    """
    Athlete.

    Created by an admin or by CSV import with a generated athlete id
    and temporary password. Connected to Strava through strava_token.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    athlete_id = Column(String(32), unique=True, nullable=False, index=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)

    # Authentication
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)

    # Personal information
    name = Column(String(255), nullable=False)
    phone_number = Column(String(50), nullable=False)
    date_of_birth = Column(String(20), nullable=False)
    gender = Column(String(20), nullable=False, index=True)

    # Address details
    group_name = Column(String(255), nullable=True)
    address = Column(Text, nullable=True)
    country = Column(String(100), nullable=False)
    state = Column(String(100), nullable=False)
    city = Column(String(100), nullable=False)
    zipcode = Column(String(20), nullable=False)

    # Preferences
    shoes_brand_model = Column(String(255), nullable=True)
    gps_watch_model = Column(String(255), nullable=True)
    hydration_supplement = Column(String(255), nullable=True)

    # Emergency contact
    emergency_contact_name = Column(String(255), nullable=True)
    emergency_contact_number = Column(String(50), nullable=True)

    # Fitness profile
    fitness_level = Column(String(50), nullable=False, default="beginner")
    fitness_goals = Column(Text, nullable=True)
    weight = Column(Float, nullable=True)  # kg
    height = Column(Float, nullable=True)  # cm

    account_status = Column(String(20), nullable=False, default="active")  # "active" | "inactive"

    # Serialized Strava credential envelope (see features/strava/envelope.py)
    strava_token = Column(Text, nullable=True)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    client = relationship("Client", back_populates="users", lazy="noload")
    activities = relationship("Activity", back_populates="user", lazy="noload")
    certificates = relationship("Certificate", back_populates="user", lazy="noload")

    @property
    def strava_connected(self) -> bool:
        return bool(self.strava_token)

    def __repr__(self):
        return f"<User {self.id} {self.athlete_id} ({self.name})>"
