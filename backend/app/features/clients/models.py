"""
Client (tenant) model.

A client is an organization with its own branded login path and
athlete roster.
"""

from datetime import datetime

from sqlalchemy import Column, String, DateTime, Integer
from sqlalchemy.orm import relationship

from app.models.base import Base


class Client(Base):
    """Tenant organization."""

    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)

    # Branded login path: /<base_path>/login
    base_path = Column(String(100), unique=True, nullable=False, index=True)
    logo_url = Column(String(500), nullable=True)

    status = Column(String(20), nullable=False, default="active")  # "active" | "inactive"

    created_at = Column(DateTime, default=datetime.utcnow)

    users = relationship("User", back_populates="client", lazy="noload")

    def __repr__(self):
        return f"<Client {self.id} /{self.base_path}>"
