"""
Certificate model.

Milestone certificates issued to athletes (per stage or per month).
"""

from datetime import datetime

from sqlalchemy import Column, String, DateTime, Integer, ForeignKey
from sqlalchemy.orm import relationship

from app.models.base import Base


class Certificate(Base):
    """Issued milestone certificate."""

    __tablename__ = "certificates"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    type = Column(String(20), nullable=False)  # "stage" | "month"
    name = Column(String(100), nullable=False)  # Stage1, January, ...
    link = Column(String(500), nullable=False)

    issued_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User", back_populates="certificates", lazy="noload")

    def __repr__(self):
        return f"<Certificate {self.id} {self.type}:{self.name} user={self.user_id}>"
