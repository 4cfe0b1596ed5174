"""
FX rate domain model.

Rates are anchored on ILS: to_ils is the authoritative field and every
cross-rate is derived from it. to_usd is kept for display only and may
lag behind manual edits.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from portfolio_engine.core.exceptions.portfolio import ValidationError
from portfolio_engine.core.types.financial import ZERO


@dataclass(frozen=True)
class FXRate:
    """Conversion rates of one currency into the USD and ILS views."""

    to_usd: float
    to_ils: float
    last_updated: datetime | None = None
    source: str = "api"
    is_manual_override: bool = False

    def __post_init__(self) -> None:
        """Validate rates after initialization."""
        if self.to_ils < ZERO:
            raise ValidationError(f"to_ILS rate must be non-negative, got {self.to_ils}")
        if self.to_usd < ZERO:
            raise ValidationError(f"to_USD rate must be non-negative, got {self.to_usd}")
        if self.last_updated is not None and self.last_updated.tzinfo is None:
            object.__setattr__(self, "last_updated", self.last_updated.replace(tzinfo=UTC))

    def to_dict(self) -> dict[str, Any]:
        """Convert rate to the persisted table shape."""
        return {
            "to_USD": self.to_usd,
            "to_ILS": self.to_ils,
            "last_updated": self.last_updated.isoformat() if self.last_updated else None,
            "source": self.source,
            "is_manual_override": self.is_manual_override,
        }

    @classmethod
    def from_dict(cls, record: Mapping[str, Any]) -> "FXRate":
        """Create a rate from a persisted record.

        Accepts both the table shape (to_USD/to_ILS) and the
        column shape (to_usd_rate/to_ils_rate).
        """
        to_usd = record.get("to_USD", record.get("to_usd", record.get("to_usd_rate")))
        to_ils = record.get("to_ILS", record.get("to_ils", record.get("to_ils_rate")))
        last_updated = record.get("last_updated")
        if isinstance(last_updated, str) and last_updated:
            last_updated = datetime.fromisoformat(last_updated.replace("Z", "+00:00"))
        return cls(
            to_usd=float(to_usd if to_usd is not None else ZERO),
            to_ils=float(to_ils if to_ils is not None else ZERO),
            last_updated=last_updated or None,
            source=record.get("source", "api"),
            is_manual_override=bool(record.get("is_manual_override", False)),
        )


# Currency code -> rate
FXRates = Mapping[str, FXRate]


def fx_rates_from_dict(raw: Mapping[str, Mapping[str, Any]]) -> dict[str, FXRate]:
    """Build an FX table from its persisted mapping."""
    return {currency.upper(): FXRate.from_dict(record) for currency, record in raw.items()}


def fx_rates_to_dict(rates: FXRates) -> dict[str, dict[str, Any]]:
    """Convert an FX table to its persisted mapping."""
    return {currency: rate.to_dict() for currency, rate in rates.items()}
