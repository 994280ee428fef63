"""Formatting utilities for currency shown in advisory messages."""

from __future__ import annotations

from typing import Union


def format_currency(amount: Union[float, int], decimals: int = 2, include_sign: bool = True) -> str:
    """Format a currency amount with thousands separators.

    Args:
        amount: The amount to format
        decimals: Number of decimal places to keep
        include_sign: Whether to include the dollar sign

    Returns:
        Formatted currency string (e.g., "$1,234.56" or "1,235")

    Example:
        >>> format_currency(1234.56)
        '$1,234.56'
        >>> format_currency(1234.56, decimals=0, include_sign=False)
        '1,235'
    """
    formatted = f"{amount:,.{decimals}f}"
    return f"${formatted}" if include_sign else formatted


def format_percent(value: float, decimals: int = 0) -> str:
    """Format a 0-100 percentage, e.g. ``format_percent(42.4) == '42%'``."""
    return f"{value:.{decimals}f}%"
