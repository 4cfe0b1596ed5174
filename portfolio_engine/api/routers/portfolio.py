"""
Portfolio API endpoints: valuation, aggregation, validation, liquidity, summary.
"""

from collections.abc import Sequence
from typing import Any

from fastapi import APIRouter
from loguru import logger

from portfolio_engine.api.schemas.api_models import (
    AggregateRequest,
    AggregateResponse,
    BucketResponse,
    DraftValidationResult,
    LiquidityRequest,
    LiquidityResponse,
    PortfolioRequest,
    SummaryRequest,
    ValidateRequest,
    ValidateResponse,
    ValuationResponse,
    ValuedAssetResponse,
)
from portfolio_engine.config import get_config
from portfolio_engine.core.enums import Dimension, LiquidityCategory, ViewCurrency
from portfolio_engine.core.exceptions.portfolio import MissingRateError
from portfolio_engine.core.models.asset import Asset
from portfolio_engine.core.models.fx import FXRates
from portfolio_engine.engine.aggregation import aggregate, value_assets
from portfolio_engine.engine.conversion import find_missing_currencies
from portfolio_engine.engine.liquidity import build_matrix
from portfolio_engine.engine.summary import build_summary

router = APIRouter()


def resolve_view_currency(
    request: PortfolioRequest, assets: Sequence[Asset], fx_rates: FXRates
) -> ViewCurrency:
    """
    Pick the view currency and enforce the strict-rate policy.

    Raises:
        MissingRateError: When strict rates are configured and the table
            lacks a needed currency
    """
    config = get_config()
    view = request.view_currency or config.valuation.default_view_currency
    if config.valuation.strict_rates:
        missing = find_missing_currencies(assets, fx_rates, view)
        if missing:
            logger.warning(f"Rejecting request, FX table is missing: {', '.join(missing)}")
            raise MissingRateError(", ".join(missing), view.value)
    return view


@router.post("/valuate", response_model=ValuationResponse)
async def valuate_portfolio(request: PortfolioRequest) -> ValuationResponse:
    """Value every asset in the view currency."""
    assets = request.domain_assets()
    fx_rates = request.domain_fx_rates()
    view = resolve_view_currency(request, assets, fx_rates)

    valued = value_assets(assets, fx_rates, view)
    return ValuationResponse(
        view_currency=view,
        total_value=sum(item.display_value for item in valued),
        assets=[
            ValuedAssetResponse(
                id=item.asset.id,
                name=item.asset.name,
                asset_class=item.asset.asset_class.value,
                **item.calculations.to_dict(),
            )
            for item in valued
        ],
    )


@router.post("/aggregate", response_model=AggregateResponse)
async def aggregate_portfolio(request: AggregateRequest) -> AggregateResponse:
    """Aggregate assets along one dimension."""
    assets = request.domain_assets()
    fx_rates = request.domain_fx_rates()
    view = resolve_view_currency(request, assets, fx_rates)

    buckets = aggregate(
        assets,
        Dimension(request.dimension),
        fx_rates,
        view,
        filters=request.filters.to_filter() if request.filters else None,
        basis=request.basis,
        as_of=request.as_of,
    )
    return AggregateResponse(
        dimension=request.dimension,
        basis=request.basis,
        view_currency=view,
        buckets=[
            BucketResponse(key=str(key), **bucket.to_dict()) for key, bucket in buckets.items()
        ],
    )


@router.post("/validate", response_model=ValidateResponse)
async def validate_assets(request: ValidateRequest) -> ValidateResponse:
    """Validate drafts, reporting every error per draft."""
    config = get_config()
    entity_banks = config.entities.entity_banks or None

    results = []
    for index, model in enumerate(request.assets):
        draft = model.to_draft()
        if request.finalize:
            draft.finalize(
                entity_beneficiary=config.entities.entity_beneficiary,
                horizon_days=config.valuation.cash_equivalent_horizon_days,
                derive_price_from_ownership=request.derive_price_from_ownership,
            )
        errors = draft.validate(entity_banks)
        results.append(
            DraftValidationResult(index=index, name=draft.name, valid=not errors, errors=errors)
        )
    return ValidateResponse(valid=all(r.valid for r in results), results=results)


@router.post("/liquidity", response_model=LiquidityResponse)
async def liquidity_matrix(request: LiquidityRequest) -> LiquidityResponse:
    """Build the liquidity category x beneficiary matrix."""
    config = get_config()
    assets = request.domain_assets()
    fx_rates = request.domain_fx_rates()
    view = resolve_view_currency(request, assets, fx_rates)

    def configured(value: list[str] | None, fallback: list[str]) -> list[str]:
        return value if value is not None else fallback

    data = build_matrix(
        assets,
        configured(request.limited_liquidity_names, config.liquidity.limited_liquidity_names),
        fx_rates,
        view,
        configured(request.beneficiaries, config.entities.beneficiaries),
        configured(request.always_funds_names, config.liquidity.always_funds_names),
    )
    payload = data.to_dict()
    return LiquidityResponse(
        view_currency=view,
        beneficiaries=data.beneficiaries,
        descriptions={category.value: category.description for category in LiquidityCategory},
        **payload,
    )


@router.post("/summary")
async def portfolio_summary(request: SummaryRequest) -> dict[str, Any]:
    """Holdings by class and entity, top positions and fixed income yield."""
    assets = request.domain_assets()
    fx_rates = request.domain_fx_rates()
    view = resolve_view_currency(request, assets, fx_rates)

    summary = build_summary(
        assets,
        fx_rates,
        view,
        top_n=request.top_n,
        filters=request.filters.to_filter() if request.filters else None,
    )
    return summary.to_dict()
