"""
Core constants and limits.

Defines engine-wide constants shared by conversion, valuation,
aggregation and comparison.
"""

# Currency anchoring
ANCHOR_CURRENCY = "ILS"  # to_ILS is the single source of truth for every rate
USD_CURRENCY = "USD"
IDENTITY_RATE = 1.0  # Fallback rate when a currency is missing from the table

# Valuation defaults
CASH_DEFAULT_PRICE = 1.0  # Cash holdings are counted in units of their currency
DEFAULT_FACTOR = 1.0  # No discount unless a factor is set

# Cash-equivalent detection
CASH_EQUIVALENT_HORIZON_DAYS = 365  # Fixed income maturing within a year

# Liquidity matrix
MATRIX_RELATIVE_TOLERANCE = 1e-6

# Comparison report limits (rows per section)
DEFAULT_TOP_N = 10
PUBLIC_EQUITY_TOP_N = 15

# Summary views
DEFAULT_TOP_POSITIONS = 10

# Maturity windows, upper bounds in years (exclusive)
MATURITY_WINDOWS: tuple[tuple[str, float], ...] = (
    ("< 1Y", 1.0),
    ("1-2Y", 2.0),
    ("2-5Y", 5.0),
    ("5-10Y", 10.0),
)
MATURITY_WINDOW_LONG = "10Y+"
MATURITY_WINDOW_MATURED = "Matured"
MATURITY_WINDOW_NONE = "No maturity"
DAYS_PER_YEAR = 365.25
