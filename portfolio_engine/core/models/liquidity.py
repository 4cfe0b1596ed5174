"""
Liquidity matrix result model.
"""

from dataclasses import dataclass
from typing import Any

from portfolio_engine.core.constants import MATRIX_RELATIVE_TOLERANCE
from portfolio_engine.core.enums import LiquidityCategory
from portfolio_engine.core.types.financial import relative_close


@dataclass(frozen=True)
class LiquidityMatrixData:
    """Liquidity category x beneficiary cross-tab with totals.

    Row and column order follow LiquidityCategory and the configured
    beneficiary order.
    """

    matrix: dict[LiquidityCategory, dict[str, float]]
    row_totals: dict[LiquidityCategory, float]
    column_totals: dict[str, float]
    grand_total: float

    @property
    def beneficiaries(self) -> list[str]:
        return list(self.column_totals)

    def cell(self, category: LiquidityCategory, beneficiary: str) -> float:
        """Value of one cell, 0 for unknown coordinates."""
        return self.matrix.get(category, {}).get(beneficiary, 0.0)

    def is_balanced(self, rel_tol: float = MATRIX_RELATIVE_TOLERANCE) -> bool:
        """Check that row totals, column totals and grand total agree."""
        rows = sum(self.row_totals.values())
        columns = sum(self.column_totals.values())
        return relative_close(rows, self.grand_total, rel_tol) and relative_close(
            columns, self.grand_total, rel_tol
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert matrix to dictionary keyed by category value."""
        return {
            "matrix": {
                category.value: dict(row) for category, row in self.matrix.items()
            },
            "row_totals": {category.value: total for category, total in self.row_totals.items()},
            "column_totals": dict(self.column_totals),
            "grand_total": self.grand_total,
        }
