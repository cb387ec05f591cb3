"""
Credential envelope codec.

The envelope is the JSON document stored in User.strava_token:

    {"access_token": "...", "refresh_token": "...", "expires_at": 1700000000,
     "athlete": {"id": 12345, ...}}

Older rows use camelCase keys and a flat athleteId; both spellings
are accepted on read, snake_case is always written.
"""

import json
import time
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, model_validator

from .exceptions import EnvelopeFormatError


class CredentialEnvelope(BaseModel):
    """OAuth tokens plus the provider athlete they belong to."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    access_token: str = Field(validation_alias=AliasChoices("access_token", "accessToken"))
    refresh_token: str = Field(validation_alias=AliasChoices("refresh_token", "refreshToken"))
    expires_at: int = Field(validation_alias=AliasChoices("expires_at", "expiresAt"))
    athlete: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def lift_legacy_athlete_id(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("athlete") and data.get("athleteId") is not None:
            data = {**data, "athlete": {"id": data["athleteId"]}}
        return data

    @property
    def athlete_id(self) -> Optional[str]:
        """Provider athlete id as a string, if known."""
        value = self.athlete.get("id")
        return str(value) if value is not None else None

    def is_expired(self, now: Optional[float] = None, margin_seconds: int = 0) -> bool:
        """True once expires_at is within margin_seconds of now."""
        now = time.time() if now is None else now
        return self.expires_at <= now + margin_seconds

    def dump(self) -> str:
        """Serialize for storage."""
        return json.dumps(self.model_dump(mode="json"), separators=(",", ":"))

    @classmethod
    def parse(cls, raw: Optional[str]) -> "CredentialEnvelope":
        """
        Parse a stored envelope.

        Raises:
            EnvelopeFormatError: If raw is empty, not JSON or lacks tokens
        """
        if not raw:
            raise EnvelopeFormatError("Empty credential envelope")
        try:
            data = json.loads(raw)
        except ValueError as e:
            raise EnvelopeFormatError("Credential envelope is not valid JSON") from e
        if not isinstance(data, dict):
            raise EnvelopeFormatError("Credential envelope must be a JSON object")
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise EnvelopeFormatError(
                f"Invalid credential envelope: {e.error_count()} errors"
            ) from e

    @classmethod
    def from_token_response(
        cls,
        payload: dict[str, Any],
        previous: Optional["CredentialEnvelope"] = None
    ) -> "CredentialEnvelope":
        """
        Build from a /oauth/token response.

        Refresh responses omit the athlete; it is carried over from
        the previous envelope.
        """
        envelope = cls.model_validate(payload)
        if not envelope.athlete and previous is not None:
            envelope = envelope.model_copy(update={"athlete": dict(previous.athlete)})
        return envelope
