"""Compact number labels for chart price axes and hover text."""

import math


def _strip_zero_decimal(text: str) -> str:
    return text[:-2] if text.endswith(".0") else text


def format_compact_number(value: float) -> str:
    """Format a value as a short axis label.

    Examples:
        1_500_000_000 -> "1.5b"
        2_000_000 -> "2m", 2_040_000 -> "2.0m", 2_500_000 -> "2.5m"
        12_000 -> "12k", 12_500 -> "12.5k"
        0.005 -> "5.0e-3"
        0.5 -> "0.50", 42 -> "42", 42.4 -> "42.4"
    """
    if math.isnan(value) or math.isinf(value):
        return str(value)

    magnitude = abs(value)
    if magnitude >= 1_000_000_000:
        return _strip_zero_decimal(f"{value / 1_000_000_000:.1f}") + "b"
    if magnitude >= 1_000_000:
        millions = value / 1_000_000
        if millions % 1 == 0:
            return f"{millions:.0f}m"
        return f"{millions:.1f}m"
    if magnitude >= 1_000:
        thousands = value / 1_000
        if thousands % 1 == 0:
            return f"{thousands:.0f}k"
        return f"{thousands:.1f}k"
    if 0 < magnitude < 0.01:
        mantissa, exponent = f"{value:.1e}".split("e")
        return f"{mantissa}e{int(exponent)}"

    if magnitude < 1:
        decimals = 2
    elif value % 1 == 0:
        decimals = 0
    else:
        decimals = 1
    return _strip_zero_decimal(f"{value:.{decimals}f}")
