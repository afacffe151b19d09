# jobs/csv_export.py
from datetime import datetime

CSV_HEADERS = (
    'Job Role ID',
    'Role Name',
    'Location',
    'Capability',
    'Band',
    'Closing Date',
    'Status',
)

_SPECIAL_CHARS = (',', '"', '\n')


def escape_csv_field(value):
    """
    Make a single scalar safe to place in a CSV row.
    Numbers are written as-is; strings containing a comma, double quote or
    newline are quoted with inner quotes doubled.
    """
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    text = '' if value is None else str(value)
    if any(ch in text for ch in _SPECIAL_CHARS):
        return '"' + text.replace('"', '""') + '"'
    return text


def _row(role):
    return (
        role.job_role_id,
        role.role_name,
        role.location,
        role.capability,
        role.band,
        role.closing_date,
        role.status,
    )


def job_roles_to_csv(job_roles):
    """
    Serialise job role records to CSV text: header line first, then one line
    per record in the order given. Lines are joined with ``\\n`` and there is
    no trailing newline.
    """
    lines = [','.join(escape_csv_field(h) for h in CSV_HEADERS)]
    for role in job_roles:
        lines.append(','.join(escape_csv_field(v) for v in _row(role)))
    return '\n'.join(lines)


def generate_csv_filename(prefix='job-roles'):
    # second precision: two calls in the same second give the same name
    return f"{prefix}-{datetime.now().strftime('%Y-%m-%d-%H%M%S')}.csv"
