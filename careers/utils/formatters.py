"""
Template formatting helpers.
Registered as Jinja filters in the app factory.
"""
from datetime import date, datetime
from typing import Union, Optional


def _parse(value: Union[date, datetime, str, None]) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, (date, datetime)):
        return value
    try:
        return datetime.fromisoformat(str(value))
    except ValueError:
        return None


def date_long(value: Union[date, datetime, str, None]) -> str:
    """
    Format a date for the public pages.

    Examples:
        date_long(date(2024, 3, 5)) -> "March 5, 2024"
        date_long(None) -> "-"
    """
    parsed = _parse(value)
    if parsed is None:
        return "-"
    return f"{parsed.strftime('%B')} {parsed.day}, {parsed.year}"


def date_short(value: Union[date, datetime, str, None]) -> str:
    """Format a date as YYYY-MM-DD (dashboard tables)."""
    parsed = _parse(value)
    if parsed is None:
        return "-"
    return parsed.strftime('%Y-%m-%d')


def year(value: Union[date, datetime, str, None] = None) -> str:
    """Year of a date, or the current year when no date is given."""
    parsed = _parse(value) or date.today()
    return str(parsed.year)


def apply_email(company_name: Optional[str], domain: str = 'example.com') -> str:
    """Application mailbox: company name lowercased without spaces."""
    local = ''.join((company_name or 'careers').lower().split())
    return f"{local}@{domain}"


def safe_url(value: Optional[str]) -> str:
    """URL for src/href attributes; anything but http(s) or site-relative becomes empty."""
    url = (value or '').strip()
    lowered = url.lower()
    if lowered.startswith(('http://', 'https://')) or (url.startswith('/') and not url.startswith('//')):
        return url
    return ''
