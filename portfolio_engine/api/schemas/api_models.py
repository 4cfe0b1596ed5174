"""
Pydantic schemas for API request/response models.
"""

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from portfolio_engine.config import EngineConfig, get_config
from portfolio_engine.core.enums import (
    AssetClass,
    ComparisonScope,
    Dimension,
    PercentageBasis,
    ViewCurrency,
)
from portfolio_engine.core.models.aggregation import AssetFilter
from portfolio_engine.core.models.asset import Asset, AssetDraft
from portfolio_engine.core.models.fx import FXRate
from portfolio_engine.core.models.snapshot import PortfolioSnapshot


class FXRateModel(BaseModel):
    """One FX table entry."""

    model_config = ConfigDict(populate_by_name=True)

    to_usd: float = Field(..., ge=0, alias="to_USD", description="Display rate into USD")
    to_ils: float = Field(..., ge=0, alias="to_ILS", description="Authoritative rate into ILS")
    last_updated: datetime | None = None
    source: str = "api"
    is_manual_override: bool = False

    def to_rate(self) -> FXRate:
        return FXRate(
            to_usd=self.to_usd,
            to_ils=self.to_ils,
            last_updated=self.last_updated,
            source=self.source,
            is_manual_override=self.is_manual_override,
        )


class AssetModel(BaseModel):
    """A validated holding as stored by the editing layer."""

    model_config = ConfigDict(populate_by_name=True)

    id: str | None = None
    name: str
    asset_class: AssetClass = Field(..., alias="class")
    sub_class: str
    account_entity: str
    account_bank: str
    beneficiary: str = ""
    origin_currency: str
    quantity: float = Field(..., ge=0)
    price: float | None = Field(default=None, description="Cash prices <= 0 value at 1")
    factor: float | None = Field(default=None, ge=0, le=1)
    maturity_date: date | None = None
    ytw: float | None = None
    pe_company_value: float | None = None
    pe_holding_percentage: float | None = None
    is_cash_equivalent: bool = False
    isin: str | None = Field(default=None, alias="ISIN")

    @field_validator("origin_currency")
    @classmethod
    def normalize_currency(cls, v: str) -> str:
        """Currency codes are upper case."""
        return v.strip().upper()

    @model_validator(mode="after")
    def validate_price(self) -> "AssetModel":
        """Only cash may carry a negative price."""
        if self.price is not None and self.price < 0 and self.asset_class != AssetClass.CASH:
            raise ValueError(f"price must be non-negative, got {self.price}")
        return self

    def to_asset(self, config: EngineConfig | None = None) -> Asset:
        """Build the domain asset, deriving a missing beneficiary from the entity."""
        record = self.model_dump()
        if not record["beneficiary"] and config is not None:
            record["beneficiary"] = config.beneficiary_for(self.account_entity)
        record["class"] = record.pop("asset_class")
        return Asset.from_dict(record)


class AssetDraftModel(BaseModel):
    """A partially filled holding submitted for validation."""

    model_config = ConfigDict(populate_by_name=True)

    id: str | None = None
    name: str | None = None
    asset_class: AssetClass | None = Field(default=None, alias="class")
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
    isin: str | None = Field(default=None, alias="ISIN")

    def to_draft(self) -> AssetDraft:
        return AssetDraft(**self.model_dump())


class FilterModel(BaseModel):
    """Include/exclude filter criteria."""

    model_config = ConfigDict(populate_by_name=True)

    asset_class: list[AssetClass] = Field(default_factory=list, alias="class")
    sub_class: list[str] = Field(default_factory=list)
    account_entity: list[str] = Field(default_factory=list)
    account_bank: list[str] = Field(default_factory=list)
    origin_currency: list[str] = Field(default_factory=list)
    beneficiary: list[str] = Field(default_factory=list)
    cash_equivalent: list[bool] = Field(default_factory=list)
    exclude_asset_class: list[AssetClass] = Field(default_factory=list, alias="exclude_class")
    exclude_sub_class: list[str] = Field(default_factory=list)
    exclude_account_entity: list[str] = Field(default_factory=list)
    exclude_account_bank: list[str] = Field(default_factory=list)
    exclude_origin_currency: list[str] = Field(default_factory=list)
    exclude_beneficiary: list[str] = Field(default_factory=list)
    exclude_cash_equivalent: list[bool] = Field(default_factory=list)
    maturity_date_from: date | None = None
    maturity_date_to: date | None = None

    def to_filter(self) -> AssetFilter:
        return AssetFilter(
            asset_class=tuple(self.asset_class),
            sub_class=tuple(self.sub_class),
            account_entity=tuple(self.account_entity),
            account_bank=tuple(self.account_bank),
            origin_currency=tuple(c.upper() for c in self.origin_currency),
            beneficiary=tuple(self.beneficiary),
            is_cash_equivalent=tuple(self.cash_equivalent),
            exclude_asset_class=tuple(self.exclude_asset_class),
            exclude_sub_class=tuple(self.exclude_sub_class),
            exclude_account_entity=tuple(self.exclude_account_entity),
            exclude_account_bank=tuple(self.exclude_account_bank),
            exclude_origin_currency=tuple(c.upper() for c in self.exclude_origin_currency),
            exclude_beneficiary=tuple(self.exclude_beneficiary),
            exclude_is_cash_equivalent=tuple(self.exclude_cash_equivalent),
            maturity_from=self.maturity_date_from,
            maturity_to=self.maturity_date_to,
        )


def _fx_table(rates: dict[str, FXRateModel]) -> dict[str, FXRate]:
    return {currency.upper(): rate.to_rate() for currency, rate in rates.items()}


class PortfolioRequest(BaseModel):
    """Assets plus the FX table to value them with."""

    assets: list[AssetModel] = Field(default_factory=list)
    fx_rates: dict[str, FXRateModel] = Field(default_factory=dict)
    view_currency: ViewCurrency | None = Field(
        default=None, description="USD or ILS; configured default when omitted"
    )

    def domain_assets(self) -> list[Asset]:
        config = get_config()
        return [asset.to_asset(config) for asset in self.assets]

    def domain_fx_rates(self) -> dict[str, FXRate]:
        return _fx_table(self.fx_rates)


class AggregateRequest(PortfolioRequest):
    """Request model for a one-dimensional aggregation."""

    dimension: str = Field(..., description="class, sub_class, account_entity, ...")
    filters: FilterModel | None = None
    basis: PercentageBasis = PercentageBasis.GRAND_TOTAL
    as_of: date | None = None

    @field_validator("dimension")
    @classmethod
    def validate_dimension(cls, v: str) -> str:
        """Dimension must be a supported grouping field."""
        return Dimension.from_string(v).value


class SummaryRequest(PortfolioRequest):
    """Request model for the portfolio summary."""

    top_n: int = Field(default=10, gt=0, le=100)
    filters: FilterModel | None = None


class LiquidityRequest(PortfolioRequest):
    """Request model for the liquidity matrix; None falls back to configuration."""

    limited_liquidity_names: list[str] | None = None
    always_funds_names: list[str] | None = None
    beneficiaries: list[str] | None = None


class ValidateRequest(BaseModel):
    """Request model for draft validation."""

    assets: list[AssetDraftModel]
    finalize: bool = Field(default=True, description="Apply class defaults before validating")
    derive_price_from_ownership: bool = False


class SnapshotModel(BaseModel):
    """A saved portfolio snapshot."""

    id: str | None = None
    name: str
    description: str | None = None
    assets: list[AssetModel] = Field(default_factory=list)
    fx_rates: dict[str, FXRateModel] = Field(default_factory=dict)
    created_at: datetime | None = None

    def to_snapshot(self) -> PortfolioSnapshot:
        config = get_config()
        return PortfolioSnapshot.capture(
            name=self.name,
            assets=[asset.to_asset(config) for asset in self.assets],
            fx_rates=_fx_table(self.fx_rates),
            description=self.description,
            created_at=self.created_at,
        )


class ComparisonRequest(BaseModel):
    """Request model for a snapshot comparison report."""

    snapshot_a: SnapshotModel | None = None
    snapshot_b: SnapshotModel | None = None
    current_fx_rates: dict[str, FXRateModel] = Field(default_factory=dict)
    top_n: dict[ComparisonScope, int] | None = None

    def domain_fx_rates(self) -> dict[str, FXRate]:
        return _fx_table(self.current_fx_rates)


class ValuedAssetResponse(BaseModel):
    """One valued asset."""

    id: str
    name: str
    asset_class: str
    raw_base_value: float
    converted_value: float
    display_value: float
    percentage_of_scope: float


class ValuationResponse(BaseModel):
    """Response model for portfolio valuation."""

    view_currency: ViewCurrency
    total_value: float
    assets: list[ValuedAssetResponse]


class BucketResponse(BaseModel):
    """One aggregation bucket."""

    key: str
    count: int
    value: float
    percentage: float


class AggregateResponse(BaseModel):
    """Response model for aggregation."""

    dimension: str
    basis: PercentageBasis
    view_currency: ViewCurrency
    buckets: list[BucketResponse]


class DraftValidationResult(BaseModel):
    """Validation outcome of one draft."""

    index: int
    name: str | None
    valid: bool
    errors: list[str]


class ValidateResponse(BaseModel):
    """Response model for draft validation."""

    valid: bool
    results: list[DraftValidationResult]


class LiquidityResponse(BaseModel):
    """Response model for the liquidity matrix."""

    view_currency: ViewCurrency
    beneficiaries: list[str]
    matrix: dict[str, dict[str, float]]
    row_totals: dict[str, float]
    column_totals: dict[str, float]
    grand_total: float
    descriptions: dict[str, str]


class ErrorResponse(BaseModel):
    """Response model for errors."""

    error: str
    message: str
    details: dict[str, Any] | None = None
