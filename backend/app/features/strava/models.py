"""
Strava-related database models.

Models:
- StravaWebhookSubscription: The application's push subscription

Athlete credentials live in User.strava_token (see envelope.py).
"""

from datetime import datetime

from sqlalchemy import Column, String, DateTime, Integer

from app.models.base import Base


class StravaWebhookSubscription(Base):
    """
    Strava push subscription.

    Strava allows one subscription per application, so this table
    holds at most one row.
    """

    __tablename__ = "strava_webhook_subscriptions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    subscription_id = Column(String(32), unique=True, nullable=False)
    callback_url = Column(String(500), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<StravaWebhookSubscription {self.subscription_id} -> {self.callback_url}>"
