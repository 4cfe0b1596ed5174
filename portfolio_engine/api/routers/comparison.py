"""
Comparison API endpoints.
"""

from typing import Any

from fastapi import APIRouter

from portfolio_engine.api.schemas.api_models import ComparisonRequest
from portfolio_engine.config import get_config
from portfolio_engine.engine.comparison import PortfolioComparison

router = APIRouter()


@router.post("/report")
async def comparison_report(request: ComparisonRequest) -> dict[str, Any]:
    """Compare two snapshots under the current FX table."""
    config = get_config()
    comparison = PortfolioComparison(
        request.snapshot_a.to_snapshot() if request.snapshot_a else None,
        request.snapshot_b.to_snapshot() if request.snapshot_b else None,
        request.domain_fx_rates(),
    )
    report = comparison.build_report(top_n=request.top_n or config.comparison.top_n)
    return report.to_dict()
