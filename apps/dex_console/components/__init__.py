"""Order form components for the DEX console."""

from __future__ import annotations

from apps.dex_console.components.order_input_session import OrderInputSession

__all__ = ["OrderInputSession"]
