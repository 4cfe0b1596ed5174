"""
Tabular export shapes.

Converts engine results into pandas DataFrames for the spreadsheet
export collaborator. Styling and file writing stay with the collaborator.
"""

from collections.abc import Hashable, Mapping, Sequence

import pandas as pd

from portfolio_engine.core.enums import AssetClass
from portfolio_engine.core.models.aggregation import AggregateBucket
from portfolio_engine.core.models.calculations import ValuedAsset
from portfolio_engine.core.models.comparison import AssetDelta, ComparisonReport, PositionChange
from portfolio_engine.core.models.liquidity import LiquidityMatrixData
from portfolio_engine.core.models.summary import (
    HoldingClass,
    HoldingsReport,
    PrivateEquitySummary,
)

TOTAL_LABEL = "Total"

DELTA_COLUMNS = [
    "asset_name",
    "asset_class",
    "origin_currency",
    "value_a",
    "value_b",
    "delta_usd",
    "price_change_percent",
]
POSITION_CHANGE_COLUMNS = [
    "asset_name",
    "asset_class",
    "sub_class",
    "origin_currency",
    "value_usd",
    "change_type",
]
BUCKET_COLUMNS = ["count", "value", "percentage"]
ASSET_COLUMNS = [
    "name",
    "class",
    "sub_class",
    "account_entity",
    "account_bank",
    "beneficiary",
    "origin_currency",
    "quantity",
    "price",
    "factor",
    "maturity_date",
    "ytw",
    "is_cash_equivalent",
    "raw_base_value",
    "converted_value",
    "display_value",
    "percentage_of_scope",
]
HOLDINGS_LEADING_COLUMNS = ["row_type", "label", "currency", "price"]
HOLDINGS_TRAILING_COLUMNS = ["total_quantity", "total_usd", "total_ils"]
PRIVATE_EQUITY_COLUMNS = ["row_type", "label", "price", "factor", "liquidation_year", "total_usd"]
REAL_ESTATE_NOTE = " (Excl. Real Estate)"


def deltas_frame(deltas: Sequence[AssetDelta]) -> pd.DataFrame:
    """One row per asset delta."""
    return pd.DataFrame([delta.to_dict() for delta in deltas], columns=DELTA_COLUMNS)


def position_changes_frame(changes: Sequence[PositionChange]) -> pd.DataFrame:
    """One row per new or deleted position."""
    return pd.DataFrame(
        [change.to_dict() for change in changes], columns=POSITION_CHANGE_COLUMNS
    )


def buckets_frame(
    buckets: Mapping[Hashable, AggregateBucket], key_name: str = "key"
) -> pd.DataFrame:
    """
    Aggregation buckets as a frame indexed by dimension value.

    Row order follows the bucket order.
    """
    frame = pd.DataFrame(
        [bucket.to_dict() for bucket in buckets.values()],
        index=pd.Index([str(key) for key in buckets], name=key_name),
        columns=BUCKET_COLUMNS,
    )
    return frame


def liquidity_matrix_frame(data: LiquidityMatrixData, with_totals: bool = True) -> pd.DataFrame:
    """
    Liquidity matrix with categories as rows and beneficiaries as columns.

    With totals, a Total column holds the row totals and a Total row the
    column totals and grand total.
    """
    frame = pd.DataFrame(
        [[data.matrix[category][b] for b in data.beneficiaries] for category in data.matrix],
        index=pd.Index([category.value for category in data.matrix], name="category"),
        columns=data.beneficiaries,
        dtype=float,
    )
    if not with_totals:
        return frame

    frame[TOTAL_LABEL] = [data.row_totals[category] for category in data.matrix]
    frame.loc[TOTAL_LABEL] = [*data.column_totals.values(), data.grand_total]
    return frame


def assets_frame(valued: Sequence[ValuedAsset]) -> pd.DataFrame:
    """Asset list with calculations, one row per holding."""
    rows = []
    for item in valued:
        record = item.asset.to_dict()
        record.update(item.calculations.to_dict())
        rows.append({column: record.get(column) for column in ASSET_COLUMNS})
    return pd.DataFrame(rows, columns=ASSET_COLUMNS)


def comparison_report_frames(report: ComparisonReport) -> dict[str, pd.DataFrame]:
    """One frame per report section plus the position changes."""
    frames = {scope.value: deltas_frame(deltas) for scope, deltas in report.sections.items()}
    frames["position_changes"] = position_changes_frame(report.position_changes)
    return frames


def _total_rows(
    row_type: str,
    label: str,
    entities: Sequence[str],
    entity_usd: Mapping[str, float],
    entity_ils: Mapping[str, float],
    total_usd: float,
    total_ils: float,
    note: str = "",
) -> list[dict[str, object]]:
    return [
        {
            "row_type": f"{row_type}_usd",
            "label": f"{label} USD{note}",
            **{entity: entity_usd.get(entity, 0.0) for entity in entities},
            "total_usd": total_usd,
        },
        {
            "row_type": f"{row_type}_ils",
            "label": f"{label} ILS{note}",
            **{entity: entity_ils.get(entity, 0.0) for entity in entities},
            "total_ils": total_ils,
        },
    ]


def _holding_class_rows(
    holding_class: HoldingClass, entities: Sequence[str]
) -> list[dict[str, object]]:
    class_name = holding_class.asset_class.value
    # Cash is a single section of currency rows without its own header
    is_cash = holding_class.asset_class == AssetClass.CASH
    rows: list[dict[str, object]] = [{"row_type": "class", "label": class_name}]
    for section in holding_class.sections:
        if not is_cash:
            rows.append({"row_type": "sub_class", "label": section.label})
        for row in section.rows:
            rows.append(
                {
                    "row_type": "holding",
                    "label": row.name,
                    "currency": row.currency,
                    "price": row.price,
                    **{entity: row.entity_quantities.get(entity, 0.0) for entity in entities},
                    "total_quantity": row.total_quantity,
                    "total_usd": row.total_usd,
                    "total_ils": row.total_ils,
                }
            )
        if not is_cash:
            rows.extend(
                _total_rows(
                    "sub_class_total",
                    f"Total {section.label}",
                    entities,
                    section.entity_totals_usd,
                    section.entity_totals_ils,
                    section.total_usd,
                    section.total_ils,
                )
            )
    rows.extend(
        _total_rows(
            "class_total",
            f"Total {class_name}",
            entities,
            holding_class.entity_totals_usd,
            holding_class.entity_totals_ils,
            holding_class.total_usd,
            holding_class.total_ils,
        )
    )
    return rows


def holdings_report_frame(report: HoldingsReport) -> pd.DataFrame:
    """
    Holdings report as spreadsheet rows.

    Holding rows carry quantities in the entity columns; total rows carry
    USD or ILS values there. The grand totals exclude real estate, whose
    rows follow them.
    """
    entities = report.entities
    rows: list[dict[str, object]] = []
    for holding_class in report.liquid_classes:
        rows.extend(_holding_class_rows(holding_class, entities))
    rows.extend(
        _total_rows(
            "grand_total",
            "Grand Total",
            entities,
            report.grand_entity_totals_usd,
            report.grand_entity_totals_ils,
            report.grand_total_usd,
            report.grand_total_ils,
            note=REAL_ESTATE_NOTE,
        )
    )
    for holding_class in report.classes:
        if holding_class.asset_class == AssetClass.REAL_ESTATE:
            rows.extend(_holding_class_rows(holding_class, entities))
    return pd.DataFrame(
        rows, columns=[*HOLDINGS_LEADING_COLUMNS, *entities, *HOLDINGS_TRAILING_COLUMNS]
    )


def private_equity_frame(summary: PrivateEquitySummary) -> pd.DataFrame:
    """Private equity report: stage headers, company rows and totals."""
    rows: list[dict[str, object]] = []
    for section in summary.sections:
        rows.append({"row_type": "sub_class", "label": section.sub_class})
        rows.extend(
            {
                "row_type": "company",
                "label": row.company,
                "price": row.price,
                "factor": row.factor,
                "liquidation_year": row.liquidation_year,
                "total_usd": row.total_usd,
            }
            for row in section.rows
        )
        rows.append(
            {
                "row_type": "sub_class_total",
                "label": f"Total {section.sub_class}",
                "total_usd": section.total_usd,
            }
        )
    if summary.sections:
        rows.append(
            {
                "row_type": "grand_total",
                "label": "Grand Total Private Equity",
                "total_usd": summary.total_usd,
            }
        )
    return pd.DataFrame(rows, columns=PRIVATE_EQUITY_COLUMNS)
