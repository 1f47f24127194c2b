"""Found-server records and the drafts they are created from."""

import math
from typing import Any

from pydantic import field_validator, model_validator

from foundrelay.domain.listing.util.value import format_value, parse_value
from foundrelay.domain.shared.model.value import ValueObject

UNKNOWN = "Unknown"
NOT_AVAILABLE = "N/A"


class ServerDraft(ValueObject):
    """A reported server, normalized and ready to be stored.

    Optional fields never fail validation: blanks fall back to the sentinels
    and unparseable values become 0.
    """

    display_name: str
    job_id: str
    place_id: int | None = None
    value: int = 0
    value_formatted: str = ""
    mutation: str = UNKNOWN
    rarity: str = UNKNOWN
    players: str = NOT_AVAILABLE
    teleport_script: str | None = None

    @field_validator("display_name", "job_id", mode="before")
    @classmethod
    def _coerce_str(cls, v: Any) -> str:
        return str(v)

    @field_validator("value", mode="before")
    @classmethod
    def _coerce_value(cls, v: Any) -> int:
        if isinstance(v, bool):
            return 0
        if isinstance(v, int):
            return max(v, 0)
        if isinstance(v, float):
            if not math.isfinite(v) or v < 0:
                return 0
            return math.floor(v)
        return parse_value(v)

    @field_validator("place_id", mode="before")
    @classmethod
    def _coerce_place_id(cls, v: Any) -> int | None:
        if v is None or isinstance(v, bool):
            return None
        if isinstance(v, int):
            return v
        if isinstance(v, float):
            return int(v) if math.isfinite(v) else None
        try:
            return int(str(v).strip())
        except ValueError:
            return None

    @field_validator("mutation", "rarity", mode="before")
    @classmethod
    def _default_unknown(cls, v: Any) -> str:
        return str(v) if v else UNKNOWN

    @field_validator("players", mode="before")
    @classmethod
    def _default_players(cls, v: Any) -> str:
        return str(v) if v else NOT_AVAILABLE

    @field_validator("value_formatted", mode="before")
    @classmethod
    def _coerce_formatted(cls, v: Any) -> str:
        return str(v) if v else ""

    @field_validator("teleport_script", mode="before")
    @classmethod
    def _empty_script_is_none(cls, v: Any) -> str | None:
        return str(v) if v else None

    @model_validator(mode="after")
    def _derive_value_formatted(self) -> "ServerDraft":
        if not self.value_formatted:
            # frozen model; bypass __setattr__ during validation
            object.__setattr__(self, "value_formatted", format_value(self.value))
        return self


class FoundServer(ServerDraft):
    """A stored record. Immutable; removed by delete or expiry, never edited."""

    id: str
    inserted_at: int  # epoch milliseconds
    expires_at: int  # inserted_at + ttl, never refreshed

    def is_active(self, now: int) -> bool:
        return self.expires_at > now
