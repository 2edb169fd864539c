"""Shared fixtures for order input tests."""

from __future__ import annotations

from decimal import Decimal

import pytest

from libs.order_input.models import MarketSnapshot, TokenInfo, TradingPair

XRD = TokenInfo(address="resource_xrd", symbol="XRD")
XUSDC = TokenInfo(address="resource_xusdc", symbol="xUSDC")


@pytest.fixture()
def pair() -> TradingPair:
    """XRD/xUSDC: TOKEN_1 is the network fee asset."""
    return TradingPair(address="component_xrd_xusdc", token1=XRD, token2=XUSDC)


@pytest.fixture()
def other_pair() -> TradingPair:
    return TradingPair(
        address="component_hug_xusdc",
        token1=TokenInfo(address="resource_hug", symbol="HUG"),
        token2=XUSDC,
    )


@pytest.fixture()
def snapshot() -> MarketSnapshot:
    return MarketSnapshot(
        balance_token1=Decimal("100"),
        balance_token2=Decimal("50"),
        best_buy=Decimal("0.9"),
        best_sell=Decimal("1.1"),
    )
