# jobs/utils.py
import re

DATE_RE = re.compile(r'^[0-9]{4}-[0-9]{2}-[0-9]{2}$')
LEADING_INT = re.compile(r'[+-]?[0-9]+')


def validate_job_role_id(value):
    """
    Parse a job role (or application) id taken from the URL.
    Returns the positive integer, or None when the value is unusable.
    """
    if not isinstance(value, str):
        value = '' if value is None else str(value)
    text = value.strip()
    if not text:
        return None
    parsed = parse_leading_int(text)
    if parsed is None or parsed <= 0:
        return None
    return parsed


def parse_leading_int(text):
    """Integer prefix of a string, the way a lenient query parser reads it."""
    m = LEADING_INT.match(text.strip())
    return int(m.group(0)) if m else None


def is_ajax(request):
    accept = request.headers.get('Accept', '')
    return (
        request.headers.get('X-Requested-With') == 'XMLHttpRequest'
        or 'application/json' in accept
    )
