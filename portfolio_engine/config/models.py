"""Pydantic models for engine configuration with validation."""

from pydantic import BaseModel, Field, field_validator, model_validator

from portfolio_engine.core.constants import (
    CASH_EQUIVALENT_HORIZON_DAYS,
    DEFAULT_TOP_N,
    PUBLIC_EQUITY_TOP_N,
)
from portfolio_engine.core.enums import ComparisonScope, ViewCurrency


class EntitiesConfig(BaseModel):
    """Account entities, their banks and beneficiaries."""

    beneficiaries: list[str] = Field(
        default_factory=list,
        description="Beneficiaries in liquidity matrix column order",
    )
    entity_beneficiary: dict[str, str] = Field(
        default_factory=dict,
        description="Account entity -> beneficiary",
    )
    entity_banks: dict[str, list[str]] = Field(
        default_factory=dict,
        description="Account entity -> banks that entity may hold accounts at",
    )

    @field_validator("beneficiaries")
    @classmethod
    def validate_unique_beneficiaries(cls, v: list[str]) -> list[str]:
        """Reject duplicate beneficiaries."""
        if len(set(v)) != len(v):
            raise ValueError("beneficiaries must be unique")
        return v

    @field_validator("entity_banks")
    @classmethod
    def validate_bank_lists(cls, v: dict[str, list[str]]) -> dict[str, list[str]]:
        """Every entity must list at least one bank."""
        for entity, banks in v.items():
            if not banks:
                raise ValueError(f"entity {entity} must list at least one bank")
        return v

    @model_validator(mode="after")
    def validate_beneficiary_targets(self) -> "EntitiesConfig":
        """Every mapped beneficiary must be declared."""
        declared = set(self.beneficiaries)
        unknown = sorted(
            {target for target in self.entity_beneficiary.values() if target not in declared}
        )
        if unknown:
            raise ValueError(f"entity_beneficiary maps to undeclared beneficiaries: {unknown}")
        return self

    @property
    def entities(self) -> list[str]:
        return list(dict.fromkeys([*self.entity_banks, *self.entity_beneficiary]))


class LiquidityConfig(BaseModel):
    """Liquidity classification tables."""

    always_funds_names: list[str] = Field(
        default_factory=list,
        description="Asset names always classified as Funds regardless of class",
    )
    limited_liquidity_names: list[str] = Field(
        default_factory=list,
        description="Equity/commodity asset names flagged as limited liquidity",
    )


class ValuationConfig(BaseModel):
    """Valuation and conversion settings."""

    default_view_currency: ViewCurrency = Field(
        default=ViewCurrency.USD,
        description="View currency used when a request does not name one",
    )
    strict_rates: bool = Field(
        default=False,
        description="Reject valuations that need an FX rate missing from the table",
    )
    cash_equivalent_horizon_days: int = Field(
        default=CASH_EQUIVALENT_HORIZON_DAYS,
        ge=0,
        le=3650,
        description="Fixed income maturing within this many days is cash equivalent",
    )


class ComparisonConfig(BaseModel):
    """Snapshot comparison report settings."""

    top_n: dict[ComparisonScope, int] = Field(
        default_factory=lambda: {
            ComparisonScope.CASH: DEFAULT_TOP_N,
            ComparisonScope.PUBLIC_EQUITY: PUBLIC_EQUITY_TOP_N,
            ComparisonScope.FIXED_INCOME: DEFAULT_TOP_N,
            ComparisonScope.PRIVATE_EQUITY: DEFAULT_TOP_N,
            ComparisonScope.REAL_ESTATE: DEFAULT_TOP_N,
        },
        description="Rows kept per report section",
    )

    @field_validator("top_n")
    @classmethod
    def validate_top_n(cls, v: dict[ComparisonScope, int]) -> dict[ComparisonScope, int]:
        """Top-N values must be positive."""
        for scope, n in v.items():
            if n <= 0:
                raise ValueError(f"top_n for {scope.value} must be positive, got {n}")
        return v


class EngineConfig(BaseModel):
    """Root configuration model."""

    entities: EntitiesConfig = Field(default_factory=EntitiesConfig)
    liquidity: LiquidityConfig = Field(default_factory=LiquidityConfig)
    valuation: ValuationConfig = Field(default_factory=ValuationConfig)
    comparison: ComparisonConfig = Field(default_factory=ComparisonConfig)

    def beneficiary_for(self, entity: str) -> str:
        """Beneficiary of an account entity, empty when unmapped."""
        return self.entities.entity_beneficiary.get(entity, "")
