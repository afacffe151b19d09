# accounts/decorators.py
from functools import wraps

from django.http import JsonResponse
from django.shortcuts import redirect, render

from jobs.constants import ADMIN_ROLE
from jobs.utils import is_ajax

LOGIN_REDIRECT = '/login?error=auth_required'


def session_user(request):
    if not request.session.get('is_authenticated'):
        return None
    return request.session.get('user') or None


def is_admin(user):
    return bool(user) and str(user.get('role') or '').lower() == ADMIN_ROLE.lower()


def _auth_required_response(request):
    # remembered so login can send the user back here
    request.session['redirect_url'] = request.get_full_path()
    if is_ajax(request):
        return JsonResponse({
            'error': 'Authentication required',
            'message': 'Please log in to access this resource',
            'redirectUrl': '/login',
        }, status=401)
    return redirect(LOGIN_REDIRECT)


def login_required(view_func):
    @wraps(view_func)
    def _wrapped(request, *args, **kwargs):
        if session_user(request) is None:
            return _auth_required_response(request)
        return view_func(request, *args, **kwargs)
    return _wrapped


def admin_required(view_func):
    @wraps(view_func)
    def _wrapped(request, *args, **kwargs):
        user = session_user(request)
        if user is None:
            return _auth_required_response(request)
        if not is_admin(user):
            if is_ajax(request):
                return JsonResponse({
                    'error': 'Access forbidden',
                    'message': 'Admin access required for this resource',
                }, status=403)
            return render(request, 'error.html', {
                'title': 'Access Forbidden',
                'message': 'Access Forbidden: Admin privileges required to access this resource.',
                'error': 'You do not have permission to access this page.',
            }, status=403)
        return view_func(request, *args, **kwargs)
    return _wrapped
