# jobs/forms.py
import re
import datetime
from urllib.parse import urlparse

from django import forms
from django.conf import settings
from django.core.exceptions import ValidationError

from .constants import VALID_BANDS, VALID_CAPABILITIES, VALID_LOCATIONS, VALID_STATUSES
from .models import JobRoleInput
from .utils import DATE_RE, parse_leading_int

REQUIRED_MESSAGE = "All fields are required. Please fill in all information."

JOB_ROLE_FIELDS = (
    'role_name', 'description', 'responsibilities', 'job_spec_link', 'location',
    'capability', 'band', 'closing_date', 'status', 'number_of_open_positions',
)


def _choices(values):
    return [('', '---')] + [(v, v) for v in values]


class JobRoleForm(forms.Form):
    """
    Create/edit form for a job role. Checks run in a fixed order and stop at
    the first failure so the page can show one message.
    New roles are always created as Open and may not close in the past;
    edits keep their own status and may carry a past closing date.
    """
    role_name = forms.CharField(required=False, max_length=255)
    description = forms.CharField(required=False, widget=forms.Textarea(attrs={'rows': 5}))
    responsibilities = forms.CharField(required=False, widget=forms.Textarea(attrs={'rows': 5}))
    job_spec_link = forms.CharField(required=False)
    location = forms.CharField(required=False, widget=forms.Select(choices=_choices(VALID_LOCATIONS)))
    capability = forms.CharField(required=False, widget=forms.Select(choices=_choices(VALID_CAPABILITIES)))
    band = forms.CharField(required=False, widget=forms.Select(choices=_choices(VALID_BANDS)))
    closing_date = forms.CharField(required=False, widget=forms.DateInput(attrs={'type': 'date'}))
    status = forms.CharField(required=False, widget=forms.Select(choices=_choices(VALID_STATUSES)))
    number_of_open_positions = forms.CharField(required=False, initial='1')

    def __init__(self, *args, is_update=False, **kwargs):
        self.is_update = is_update
        super().__init__(*args, **kwargs)
        if not is_update:
            # status is not user-editable on create
            self.fields.pop('status')

    def clean(self):
        cleaned = super().clean()
        data = {name: (cleaned.get(name) or '').strip() for name in JOB_ROLE_FIELDS if name != 'status'}
        data['status'] = (cleaned.get('status') or '').strip() if self.is_update else 'Open'
        if not self.is_update and not data['number_of_open_positions']:
            data['number_of_open_positions'] = '1'

        if not all(data.values()):
            raise ValidationError(REQUIRED_MESSAGE)

        if data['location'] not in VALID_LOCATIONS:
            raise ValidationError(
                f'Invalid location: "{data["location"]}". Please select a valid location from the dropdown.')
        if data['capability'] not in VALID_CAPABILITIES:
            raise ValidationError(
                f'Invalid capability: "{data["capability"]}". Please select a valid capability from the dropdown.')
        if data['band'] not in VALID_BANDS:
            raise ValidationError(
                f'Invalid band level: "{data["band"]}". Please select a valid band from the dropdown.')
        if data['status'] not in VALID_STATUSES:
            raise ValidationError(
                f'Invalid status: "{data["status"]}". Please select a valid status from the dropdown.')

        positions = parse_leading_int(data['number_of_open_positions'])
        if positions is None or positions < 1:
            raise ValidationError("Number of open positions must be at least 1.")

        if not DATE_RE.match(data['closing_date']):
            raise ValidationError("Invalid date format. Please use YYYY-MM-DD format.")
        if not self.is_update:
            try:
                closing = datetime.date.fromisoformat(data['closing_date'])
            except ValueError:
                raise ValidationError("Invalid date format. Please use YYYY-MM-DD format.")
            if closing < datetime.date.today():
                raise ValidationError("Closing date cannot be in the past.")

        link = urlparse(data['job_spec_link'])
        if link.scheme not in ('http', 'https') or not link.netloc:
            raise ValidationError(
                "Invalid URL format for Job Spec Link. URL must start with http:// or https://")

        if len(data['role_name']) < 3:
            raise ValidationError("Role name must be at least 3 characters long.")
        if len(data['description']) < 10:
            raise ValidationError("Job description must be at least 10 characters long.")
        if len(data['responsibilities']) < 10:
            raise ValidationError("Key responsibilities must be at least 10 characters long.")

        data['number_of_open_positions'] = positions
        cleaned.update(data)
        return cleaned

    def first_error(self):
        for errors in self.errors.values():
            if errors:
                return errors[0]
        return None

    def to_input(self):
        return JobRoleInput(**{name: self.cleaned_data[name] for name in JOB_ROLE_FIELDS})


# -------------------------
# Job applications
# -------------------------
EMAIL_RE = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*\.[a-zA-Z]{2,}$"
)
# letters from any script, plus spaces, hyphens and apostrophes
NAME_RE = re.compile(r"^(?:[^\W\d_]|[\s'-])+$")

MIN_NAME_LENGTH = 2
MAX_NAME_LENGTH = 100
MAX_EMAIL_LENGTH = 255
MAX_COVER_LETTER_LENGTH = 5000


class ApplicationForm(forms.Form):
    """Applicant details plus CV upload. Every field error is reported."""
    applicant_name = forms.CharField(required=False)
    applicant_email = forms.CharField(required=False)
    cover_letter = forms.CharField(required=False, widget=forms.Textarea(attrs={'rows': 6}))
    cv = forms.FileField(required=False)

    def clean_applicant_name(self):
        name = (self.cleaned_data.get('applicant_name') or '').strip()
        if not name:
            raise ValidationError("Applicant name is required")
        if len(name) < MIN_NAME_LENGTH:
            raise ValidationError(f"Name must be at least {MIN_NAME_LENGTH} characters long")
        if len(name) > MAX_NAME_LENGTH:
            raise ValidationError(f"Name must not exceed {MAX_NAME_LENGTH} characters")
        if not NAME_RE.match(name):
            raise ValidationError("Name can only contain letters, spaces, hyphens, and apostrophes")
        return name

    def clean_applicant_email(self):
        email = (self.cleaned_data.get('applicant_email') or '').strip()
        if not email:
            raise ValidationError("Email address is required")
        if not EMAIL_RE.match(email):
            raise ValidationError("Please provide a valid email address")
        if len(email) > MAX_EMAIL_LENGTH:
            raise ValidationError("Email address is too long")
        return email

    def clean_cover_letter(self):
        text = (self.cleaned_data.get('cover_letter') or '').strip()
        if len(text) > MAX_COVER_LETTER_LENGTH:
            raise ValidationError(f"Cover letter must not exceed {MAX_COVER_LETTER_LENGTH} characters")
        return text

    def clean_cv(self):
        f = self.cleaned_data.get('cv')
        if not f:
            raise ValidationError("CV file is required")
        if f.size > settings.CV_MAX_UPLOAD_SIZE:
            raise ValidationError("CV file size must not exceed 5MB")
        if getattr(f, 'content_type', None) not in settings.CV_ALLOWED_MIME_TYPES:
            raise ValidationError("CV must be in PDF, DOC, or DOCX format")
        return f

    def error_summary(self):
        messages = [str(err) for errors in self.errors.values() for err in errors]
        return ". ".join(messages)


class ApplicantDecisionForm(forms.Form):
    reason = forms.CharField(required=False, max_length=1000)
