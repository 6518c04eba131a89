from datetime import datetime
from decimal import Decimal
from typing import Optional


def isoformat(value: Optional[datetime]) -> str:
    return value.isoformat() if value else ""


def format_price(value) -> str:
    """Render a fixed-point price with exactly two decimals."""
    if value is None:
        return "0.00"
    return f"{Decimal(str(value)):.2f}"
