"""
Activity model.

One logged or imported workout. Imported activities carry
external_id/external_source; the (user_id, external_id) unique
constraint is what actually prevents double imports.
"""

from datetime import datetime

from sqlalchemy import (
    Column, String, DateTime, Integer, Float, ForeignKey, Text, UniqueConstraint
)
from sqlalchemy.orm import relationship

from app.models.base import Base


class Activity(Base):
    """Logged workout."""

    __tablename__ = "activities"
    __table_args__ = (
        UniqueConstraint("user_id", "external_id", name="uq_activities_user_external"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # Activity info
    type = Column(String(20), nullable=False, index=True)  # running | cycling | walking
    date = Column(DateTime, nullable=False, index=True)  # when it happened
    distance = Column(Float, nullable=False)  # kilometers
    duration = Column(Integer, nullable=False)  # seconds
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)

    # Proof (required from the proof threshold upwards)
    proof_link = Column(String(500), nullable=True)
    proof_image = Column(Text, nullable=True)

    # Import metadata (NULL for manual entries)
    external_id = Column(String(64), nullable=True)
    external_source = Column(String(32), nullable=True)

    # Optional metrics
    elevation_gain = Column(Float, nullable=True)  # meters
    avg_heart_rate = Column(Float, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User", back_populates="activities", lazy="noload")

    def __repr__(self):
        return f"<Activity {self.id} {self.type} {self.distance}km user={self.user_id}>"

    @property
    def pace_min_per_km(self) -> float | None:
        """Average pace in min/km."""
        if not self.distance or not self.duration:
            return None
        return round((self.duration / 60) / self.distance, 2)
