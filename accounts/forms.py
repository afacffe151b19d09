# accounts/forms.py
import re

from django import forms
from django.core.exceptions import ValidationError

EMAIL_RE = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')
SPECIAL_CHARS = '!@#$%^&*(),.?":{}|<>'
MAX_NAME_LENGTH = 50


def validate_email_address(value):
    if not value or not value.strip():
        raise ValidationError("Email is required")
    if not EMAIL_RE.match(value):
        raise ValidationError("Please enter a valid email address")


def password_errors(password):
    """Every rule the password breaks, in display order."""
    if not password:
        return ["Password is required"]
    errors = []
    if len(password) < 8:
        errors.append("Password must be at least 8 characters long")
    if not re.search(r'[A-Z]', password):
        errors.append("Password must contain at least one uppercase letter")
    if not re.search(r'[a-z]', password):
        errors.append("Password must contain at least one lowercase letter")
    if not re.search(r'[0-9]', password):
        errors.append("Password must contain at least one number")
    if not any(ch in SPECIAL_CHARS for ch in password):
        errors.append(f"Password must contain at least one special character ({SPECIAL_CHARS})")
    return errors


class _AuthForm(forms.Form):
    def error_list(self):
        return [str(err) for errors in self.errors.values() for err in errors]


class LoginForm(_AuthForm):
    email = forms.CharField(required=False, widget=forms.EmailInput(attrs={'autocomplete': 'email'}))
    password = forms.CharField(required=False, strip=False, widget=forms.PasswordInput)

    def clean_email(self):
        email = (self.cleaned_data.get('email') or '').strip()
        validate_email_address(email)
        return email

    def clean_password(self):
        password = self.cleaned_data.get('password') or ''
        if not password.strip():
            raise ValidationError("Password is required")
        return password


class RegisterForm(_AuthForm):
    email = forms.CharField(required=False, widget=forms.EmailInput(attrs={'autocomplete': 'email'}))
    password = forms.CharField(required=False, strip=False, widget=forms.PasswordInput)
    forename = forms.CharField(required=False, label="First name")
    surname = forms.CharField(required=False, label="Last name")

    def clean_email(self):
        email = (self.cleaned_data.get('email') or '').strip()
        validate_email_address(email)
        return email

    def clean_password(self):
        password = self.cleaned_data.get('password') or ''
        errors = password_errors(password)
        if errors:
            raise ValidationError(errors)
        return password

    def _clean_name(self, field, label):
        name = (self.cleaned_data.get(field) or '').strip()
        if not name:
            raise ValidationError(f"{label} is required")
        if len(name) > MAX_NAME_LENGTH:
            raise ValidationError(f"{label} must not exceed {MAX_NAME_LENGTH} characters")
        return name

    def clean_forename(self):
        return self._clean_name('forename', "First name")

    def clean_surname(self):
        return self._clean_name('surname', "Last name")
