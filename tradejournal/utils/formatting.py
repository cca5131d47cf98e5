"""Display formatting for currency and percentage values."""


def format_currency(amount: float) -> str:
    """Render as US dollars with thousands separators, e.g. "$1,234.50" / "-$12.00"."""
    sign = "-" if amount < 0 and round(abs(amount), 2) != 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def format_percentage(value: float) -> str:
    """Render with an explicit sign for non-negative values, e.g. "+5.00%"."""
    prefix = "+" if value >= 0 else ""
    return f"{prefix}{value:.2f}%"
