"""
Asset domain models.

Asset is the validated, immutable holding record the engine values.
AssetDraft is the mutable builder the editing layer fills in field by
field; finalize() applies class-specific defaults and build() turns it
into an Asset once every field validates.
"""

from collections.abc import Mapping, Sequence
from dataclasses import asdict, dataclass, field
from datetime import date, datetime, timedelta
from typing import Any
from uuid import uuid4

from portfolio_engine.core.constants import (
    CASH_DEFAULT_PRICE,
    CASH_EQUIVALENT_HORIZON_DAYS,
    DEFAULT_FACTOR,
)
from portfolio_engine.core.enums import AssetClass, FixedIncomeSubClass
from portfolio_engine.core.exceptions.portfolio import AssetValidationError
from portfolio_engine.core.types.financial import ZERO, round_half_up


def _parse_date(value: date | str | None) -> date | None:
    """Parse an ISO date, tolerating empty strings and datetimes."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value[:10])


def _parse_datetime(value: datetime | str | None) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def compute_cash_equivalent(
    asset_class: AssetClass | None,
    sub_class: str | None,
    maturity_date: date | None,
    as_of: date | None = None,
    horizon_days: int = CASH_EQUIVALENT_HORIZON_DAYS,
) -> bool:
    """Check if a holding counts as a cash equivalent.

    Cash, money market funds and bank deposits always qualify; other
    fixed income qualifies when it matures within the horizon.

    Args:
        asset_class: Class of the holding
        sub_class: Sub-class of the holding
        maturity_date: Maturity date, if any
        as_of: Reference date (default today)
        horizon_days: Maturity horizon in days

    Returns:
        True if the holding is a cash equivalent
    """
    if asset_class == AssetClass.CASH:
        return True
    if asset_class != AssetClass.FIXED_INCOME:
        return False
    if sub_class in FixedIncomeSubClass and FixedIncomeSubClass(sub_class).is_cash_like:
        return True
    if maturity_date is None:
        return False
    reference = as_of or date.today()
    return maturity_date <= reference + timedelta(days=horizon_days)


def derive_pe_price(
    company_value: float | None,
    holding_percentage: float | None,
    quantity: float | None,
    manual_price: float | None = None,
) -> float | None:
    """Derive a private-equity unit price from the ownership stake.

    price = round(company_value * holding_percentage / 100 / quantity)

    Args:
        company_value: Market value of the whole company
        holding_percentage: Percentage of the company held (0-100)
        quantity: Units held, must be positive
        manual_price: Price kept when the derivation is not possible

    Returns:
        Derived price, or the manual price when inputs are incomplete
    """
    if company_value is None or holding_percentage is None:
        return manual_price
    if quantity is None or quantity <= ZERO:
        return manual_price
    holding_value = company_value * (holding_percentage / 100.0)
    return round_half_up(holding_value / quantity)


@dataclass(frozen=True)
class Asset:
    """A single holding in one account.

    Instances are immutable; edits go through AssetDraft.
    """

    name: str
    asset_class: AssetClass
    sub_class: str
    account_entity: str
    account_bank: str
    origin_currency: str
    quantity: float
    price: float | None = None
    factor: float | None = None
    maturity_date: date | None = None
    ytw: float | None = None
    pe_company_value: float | None = None
    pe_holding_percentage: float | None = None
    beneficiary: str = ""
    is_cash_equivalent: bool = False
    isin: str | None = None
    id: str = field(default_factory=lambda: str(uuid4()))
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        """Normalize enum and date fields loaded from plain records."""
        if not isinstance(self.asset_class, AssetClass):
            object.__setattr__(self, "asset_class", AssetClass(self.asset_class))
        object.__setattr__(self, "maturity_date", _parse_date(self.maturity_date))
        object.__setattr__(self, "origin_currency", str(self.origin_currency).upper())

    @property
    def has_maturity(self) -> bool:
        """Check if the asset carries a maturity date."""
        return self.maturity_date is not None

    def to_dict(self) -> dict[str, Any]:
        """Convert asset to its persisted record shape."""
        record = asdict(self)
        record["class"] = self.asset_class.value
        del record["asset_class"]
        record["maturity_date"] = self.maturity_date.isoformat() if self.maturity_date else None
        record["created_at"] = self.created_at.isoformat() if self.created_at else None
        record["updated_at"] = self.updated_at.isoformat() if self.updated_at else None
        return record

    @classmethod
    def from_dict(cls, record: Mapping[str, Any]) -> "Asset":
        """Create an asset from a persisted record.

        Accepts either "class" or "asset_class" for the asset class key.
        """
        asset_class = record.get("class", record.get("asset_class"))
        optional_floats = ("price", "factor", "ytw", "pe_company_value", "pe_holding_percentage")
        values = {
            key: float(record[key]) if record.get(key) is not None else None
            for key in optional_floats
        }
        return cls(
            id=str(record.get("id") or uuid4()),
            name=record.get("name", ""),
            asset_class=AssetClass(asset_class),
            sub_class=record.get("sub_class", ""),
            account_entity=record.get("account_entity", ""),
            account_bank=record.get("account_bank", ""),
            beneficiary=record.get("beneficiary") or "",
            origin_currency=record.get("origin_currency", ""),
            quantity=float(record.get("quantity") or ZERO),
            maturity_date=_parse_date(record.get("maturity_date")),
            is_cash_equivalent=bool(record.get("is_cash_equivalent", False)),
            isin=record.get("isin") or record.get("ISIN"),
            created_at=_parse_datetime(record.get("created_at")),
            updated_at=_parse_datetime(record.get("updated_at")),
            **values,
        )


@dataclass
class AssetDraft:
    """Mutable, partially filled asset used while editing.

    Fields are set incrementally by the editing layer. Call finalize()
    once to apply class defaults, then validate() or build().
    """

    name: str | None = None
    asset_class: AssetClass | None = None
    sub_class: str | None = None
    account_entity: str | None = None
    account_bank: str | None = None
    origin_currency: str | None = None
    quantity: float | None = None
    price: float | None = None
    factor: float | None = None
    maturity_date: date | None = None
    ytw: float | None = None
    pe_company_value: float | None = None
    pe_holding_percentage: float | None = None
    beneficiary: str | None = None
    is_cash_equivalent: bool = False
    isin: str | None = None
    id: str | None = None

    def finalize(
        self,
        entity_beneficiary: Mapping[str, str] | None = None,
        as_of: date | None = None,
        horizon_days: int = CASH_EQUIVALENT_HORIZON_DAYS,
        derive_price_from_ownership: bool = False,
    ) -> "AssetDraft":
        """Apply class-specific defaults in place.

        - Cash: sub-class defaults to the origin currency, price to 1
        - Private Equity / Real Estate: factor defaults to 1.0
        - Private Equity: price derived from ownership when requested
        - Beneficiary derived from the account entity
        - Cash-equivalent flag recomputed

        Args:
            entity_beneficiary: Account entity to beneficiary mapping
            as_of: Reference date for the cash-equivalent horizon
            horizon_days: Cash-equivalent maturity horizon
            derive_price_from_ownership: Derive PE price from company value

        Returns:
            The same draft, for chaining
        """
        if self.asset_class is not None and not isinstance(self.asset_class, AssetClass):
            self.asset_class = AssetClass(self.asset_class)
        if self.origin_currency:
            self.origin_currency = self.origin_currency.upper()
        self.maturity_date = _parse_date(self.maturity_date)

        if self.asset_class == AssetClass.CASH:
            if not self.sub_class and self.origin_currency:
                self.sub_class = self.origin_currency
            if self.price is None or self.price <= ZERO:
                self.price = CASH_DEFAULT_PRICE

        if self.asset_class is not None and self.asset_class.uses_factor and self.factor is None:
            self.factor = DEFAULT_FACTOR

        if derive_price_from_ownership and self.asset_class == AssetClass.PRIVATE_EQUITY:
            self.price = derive_pe_price(
                self.pe_company_value, self.pe_holding_percentage, self.quantity, self.price
            )

        if entity_beneficiary and self.account_entity in entity_beneficiary:
            self.beneficiary = entity_beneficiary[self.account_entity]

        self.is_cash_equivalent = compute_cash_equivalent(
            self.asset_class, self.sub_class, self.maturity_date, as_of, horizon_days
        )
        return self

    def validate(self, entity_banks: Mapping[str, Sequence[str]] | None = None) -> list[str]:
        """Collect every validation error for this draft."""
        from portfolio_engine.core.utils.validation import validate_asset

        return validate_asset(self, entity_banks)

    def build(self, entity_banks: Mapping[str, Sequence[str]] | None = None) -> Asset:
        """Build an immutable Asset.

        Raises:
            AssetValidationError: With every violation, if any
        """
        errors = self.validate(entity_banks)
        if errors:
            raise AssetValidationError(errors, asset_name=self.name)

        optional = {"id": self.id} if self.id else {}
        uses_factor = self.asset_class.uses_factor  # type: ignore[union-attr]
        return Asset(
            name=(self.name or "").strip() or str(self.sub_class),
            asset_class=self.asset_class,  # type: ignore[arg-type]
            sub_class=self.sub_class,  # type: ignore[arg-type]
            account_entity=self.account_entity,  # type: ignore[arg-type]
            account_bank=self.account_bank,  # type: ignore[arg-type]
            origin_currency=self.origin_currency,  # type: ignore[arg-type]
            quantity=float(self.quantity),  # type: ignore[arg-type]
            price=self.price,
            factor=self.factor if uses_factor else None,
            maturity_date=self.maturity_date,
            ytw=self.ytw,
            pe_company_value=self.pe_company_value,
            pe_holding_percentage=self.pe_holding_percentage,
            beneficiary=self.beneficiary or "",
            is_cash_equivalent=self.is_cash_equivalent,
            isin=self.isin,
            **optional,
        )

    @classmethod
    def from_asset(cls, asset: Asset) -> "AssetDraft":
        """Start an edit from an existing asset."""
        return cls(
            name=asset.name,
            asset_class=asset.asset_class,
            sub_class=asset.sub_class,
            account_entity=asset.account_entity,
            account_bank=asset.account_bank,
            origin_currency=asset.origin_currency,
            quantity=asset.quantity,
            price=asset.price,
            factor=asset.factor,
            maturity_date=asset.maturity_date,
            ytw=asset.ytw,
            pe_company_value=asset.pe_company_value,
            pe_holding_percentage=asset.pe_holding_percentage,
            beneficiary=asset.beneficiary,
            is_cash_equivalent=asset.is_cash_equivalent,
            isin=asset.isin,
            id=asset.id,
        )
