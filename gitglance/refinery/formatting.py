from datetime import datetime

def format_date(value: datetime) -> str:
    """e.g. 'Mar 07, 2025'"""
    return value.strftime("%b %d, %Y")

def format_number(value: int) -> str:
    return f"{value:,}"
