# accounts/views.py
import logging

from django.contrib import messages
from django.shortcuts import redirect, render
from django.utils.http import url_has_allowed_host_and_scheme
from django.views.decorators.http import require_http_methods

from .decorators import session_user
from .forms import LoginForm, RegisterForm
from .services import AuthError, AuthService

logger = logging.getLogger(__name__)

GENERIC_ERROR = "An error occurred. Please try again later."


def get_auth_service():
    return AuthService()


def _start_session(request, user):
    redirect_url = request.session.get('redirect_url')
    request.session.cycle_key()
    request.session['is_authenticated'] = True
    request.session['user'] = user
    request.session.pop('redirect_url', None)
    if redirect_url and url_has_allowed_host_and_scheme(redirect_url, allowed_hosts={request.get_host()}):
        return redirect_url
    return '/'


@require_http_methods(['GET', 'POST'])
def login_view(request):
    if session_user(request) is not None:
        return redirect('/')

    if request.method != 'POST':
        errors = []
        if request.GET.get('error') == 'auth_required':
            errors.append("Please log in to access this page.")
        return render(request, 'accounts/login.html', {'title': 'Login', 'form': LoginForm(), 'validation_errors': errors})

    form = LoginForm(request.POST)
    if not form.is_valid():
        return render(request, 'accounts/login.html', {
            'title': 'Login', 'form': form, 'validation_errors': form.error_list(),
        }, status=400)

    try:
        user = get_auth_service().login(form.cleaned_data['email'], form.cleaned_data['password'])
    except AuthError as exc:
        logger.warning("Login failed for %s: %s", form.cleaned_data['email'], exc.message)
        status = 500 if exc.status_code is None or exc.status_code >= 500 else 401
        errors = [GENERIC_ERROR] if status == 500 else [exc.message or "Invalid credentials"]
        return render(request, 'accounts/login.html', {
            'title': 'Login', 'form': form, 'validation_errors': errors,
        }, status=status)

    target = _start_session(request, user)
    messages.success(request, f"Logged in successfully as: {user['forename']} {user['surname']}")
    return redirect(target)


@require_http_methods(['GET', 'POST'])
def register_view(request):
    if session_user(request) is not None:
        return redirect('/')

    if request.method != 'POST':
        return render(request, 'accounts/register.html', {'title': 'Register', 'form': RegisterForm()})

    form = RegisterForm(request.POST)
    if not form.is_valid():
        return render(request, 'accounts/register.html', {
            'title': 'Register', 'form': form, 'validation_errors': form.error_list(),
        }, status=400)

    data = form.cleaned_data
    try:
        user = get_auth_service().register(data['email'], data['password'], data['forename'], data['surname'])
    except AuthError as exc:
        logger.warning("Registration failed for %s: %s", data['email'], exc.message)
        if exc.status_code is None or exc.status_code >= 500:
            status, errors = 500, [GENERIC_ERROR]
        else:
            status, errors = 400, exc.messages
        return render(request, 'accounts/register.html', {
            'title': 'Register', 'form': form, 'validation_errors': errors,
        }, status=status)

    target = _start_session(request, user)
    messages.success(request, f"Registered and logged in successfully as: {user['forename']} {user['surname']}")
    return redirect(target)


@require_http_methods(['GET', 'POST'])
def logout_view(request):
    try:
        get_auth_service().logout()
    except AuthError as exc:
        # the local session is cleared regardless
        logger.warning("Backend logout failed: %s", exc.message)
    request.session.flush()
    return redirect('/login')
