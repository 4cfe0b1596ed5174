"""
Shared fixtures: an FX table with round numbers and a small family portfolio.

FX table (ILS anchor):
    USD 4.0 ILS, EUR 4.4 ILS (1.1 USD), CHF 4.8 ILS (1.2 USD)

The stored to_USD of EUR is deliberately stale so tests catch any code
path that reads it instead of deriving the rate from to_ILS.
"""

from collections.abc import Callable
from datetime import date
from typing import Any

import pytest

from portfolio_engine.config import CONFIG_ENV_VAR, EngineConfig, set_config
from portfolio_engine.core.enums import AssetClass
from portfolio_engine.core.models.asset import Asset
from portfolio_engine.core.models.fx import FXRate

AS_OF = date(2025, 1, 1)


@pytest.fixture(autouse=True)
def reset_config(monkeypatch: pytest.MonkeyPatch) -> Any:
    """Every test starts from default configuration."""
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    set_config(None)
    yield
    set_config(None)


@pytest.fixture
def fx_rates() -> dict[str, FXRate]:
    return {
        "USD": FXRate(to_usd=1.0, to_ils=4.0),
        "ILS": FXRate(to_usd=0.25, to_ils=1.0),
        "EUR": FXRate(to_usd=1.5, to_ils=4.4),
        "CHF": FXRate(to_usd=1.2, to_ils=4.8),
    }


@pytest.fixture
def make_asset() -> Callable[..., Asset]:
    """Factory building a valid public equity holding with overrides."""

    def _make(**overrides: Any) -> Asset:
        fields: dict[str, Any] = {
            "name": "Apple",
            "asset_class": AssetClass.PUBLIC_EQUITY,
            "sub_class": "Big Tech",
            "account_entity": "Shimon",
            "account_bank": "Poalim",
            "origin_currency": "USD",
            "quantity": 10.0,
            "price": 100.0,
            "beneficiary": "Shimon",
        }
        fields.update(overrides)
        return Asset(**fields)

    return _make


@pytest.fixture
def sample_assets(make_asset: Callable[..., Asset]) -> list[Asset]:
    """
    Nine holdings across every class.

    USD display values: 10000, 10000, 1000, 11000, 5000, 2500, 100000,
    4000, 3000 (total 146500). Converted total is 149000 because the
    startup carries a 0.5 factor.
    """
    return [
        make_asset(
            name="USD Cash",
            asset_class=AssetClass.CASH,
            sub_class="USD",
            quantity=10000.0,
            price=None,
        ),
        make_asset(
            name="ILS Cash",
            asset_class=AssetClass.CASH,
            sub_class="ILS",
            account_entity="Hagit",
            account_bank="Leumi 1",
            beneficiary="Hagit",
            origin_currency="ILS",
            quantity=40000.0,
            price=1.0,
        ),
        make_asset(),
        make_asset(
            name="Bund 2027",
            asset_class=AssetClass.FIXED_INCOME,
            sub_class="Gov long",
            account_entity="Guy",
            account_bank="Julius Bär",
            beneficiary="Kids",
            origin_currency="EUR",
            quantity=100.0,
            price=100.0,
            ytw=4.0,
            maturity_date=date(2027, 6, 30),
        ),
        make_asset(
            name="Money Market",
            asset_class=AssetClass.FIXED_INCOME,
            sub_class="Money Market",
            account_entity="Tom",
            account_bank="Tom Trust",
            beneficiary="Tom",
            quantity=5000.0,
            price=1.0,
            ytw=5.0,
        ),
        make_asset(
            name="Startup",
            asset_class=AssetClass.PRIVATE_EQUITY,
            sub_class="Initial",
            quantity=100.0,
            price=50.0,
            factor=0.5,
        ),
        make_asset(
            name="Apartment",
            asset_class=AssetClass.REAL_ESTATE,
            sub_class="Living",
            account_entity="Hagit",
            account_bank="Leumi 1",
            beneficiary="Hagit",
            origin_currency="ILS",
            quantity=1.0,
            price=400000.0,
            factor=1.0,
        ),
        make_asset(
            name="Gold",
            asset_class=AssetClass.COMMODITIES,
            sub_class="Commodities",
            account_entity="Guy",
            account_bank="Poalim",
            beneficiary="Kids",
            quantity=2.0,
            price=2000.0,
        ),
        make_asset(
            name="Credit Fund",
            asset_class=AssetClass.FIXED_INCOME,
            sub_class="Private Credit",
            quantity=1.0,
            price=3000.0,
        ),
    ]


@pytest.fixture
def engine_config() -> EngineConfig:
    """Configuration with the entity tables used by the sample portfolio."""
    return EngineConfig(
        entities={
            "beneficiaries": ["Shimon", "Hagit", "Kids", "Tom"],
            "entity_beneficiary": {
                "Shimon": "Shimon",
                "Hagit": "Hagit",
                "Guy": "Kids",
                "Tom": "Tom",
            },
            "entity_banks": {
                "Shimon": ["Poalim", "Leumi"],
                "Hagit": ["Leumi 1", "Leumi 2"],
                "Guy": ["Poalim", "Julius Bär"],
                "Tom": ["Tom Trust"],
            },
        },
        liquidity={"always_funds_names": ["Crypto Fund (Ben)"]},
    )
