# jobs/templatetags/job_filters.py
from datetime import date, datetime

from django import template

register = template.Library()


def _parse(value):
    if isinstance(value, (datetime, date)):
        return value
    try:
        return datetime.fromisoformat(str(value).strip().replace('Z', '+00:00'))
    except ValueError:
        return None


@register.filter
def format_date(value):
    """ISO date or timestamp as dd/mm/yyyy; unparseable input is returned as-is."""
    if not value:
        return ''
    parsed = _parse(value)
    if parsed is None:
        return value
    return parsed.strftime('%d/%m/%Y')


@register.filter
def format_datetime(value):
    if not value:
        return ''
    parsed = _parse(value)
    if parsed is None:
        return value
    if not isinstance(parsed, datetime):
        parsed = datetime(parsed.year, parsed.month, parsed.day)
    return parsed.strftime('%d/%m/%Y %H:%M:%S')


@register.filter
def format_band(value):
    if not value:
        return ''
    return f'{value} Level'
