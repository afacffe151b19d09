# jobs/views.py
import json
import logging
from datetime import datetime

import requests
from django.conf import settings
from django.contrib import messages
from django.http import HttpResponse, JsonResponse
from django.shortcuts import redirect, render
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from accounts.decorators import admin_required, login_required, session_user

from .constants import APPLICATION_STATUS_ACCEPTED, APPLICATION_STATUS_REJECTED
from .csv_export import generate_csv_filename, job_roles_to_csv
from .email_utils import notify_applicant
from .forms import ApplicantDecisionForm, ApplicationForm, JobRoleForm
from .pagination import (
    DEFAULT_PAGE, SEARCH_PARAM_KEYS, build_pagination_urls, validate_pagination_params,
)
from .services import ApplicationService, BackendError, BackendUnavailable, JobRoleService, NotFound
from .utils import parse_leading_int, validate_job_role_id

logger = logging.getLogger(__name__)

INVALID_ID_MESSAGE = "Invalid job role ID provided. Please provide a valid numeric ID."
ROLE_NOT_FOUND_MESSAGE = (
    "Job role not found. The role you're looking for may have been removed or doesn't exist.")
LIST_ERROR_MESSAGE = "Sorry, we couldn't load the job roles at this time. Please try again later."

APPLICANTS_DEFAULT_LIMIT = 10
APPLICANTS_MAX_LIMIT = 50


def _error(request, message, status, **extra):
    context = {'message': message}
    context.update(extra)
    return render(request, 'error.html', context, status=status)


# -------------------------
# Home / health
# -------------------------
@require_GET
def home(request):
    return render(request, 'home.html', {
        'app': settings.APP_NAME,
        'version': settings.APP_VERSION,
        'environment': settings.APP_ENVIRONMENT,
        'timestamp': datetime.now().strftime('%d/%m/%Y, %H:%M'),
    })


@require_GET
def health(request):
    """Report whether the backend API answers."""
    backend_url = settings.API_BASE_URL
    try:
        resp = requests.get(f"{backend_url}/api/job-roles", timeout=settings.API_TIMEOUT)
    except requests.RequestException as exc:
        logger.warning("Health check could not reach backend at %s: %s", backend_url, exc)
        return JsonResponse({
            'status': 'error',
            'backend': 'unreachable',
            'backendUrl': backend_url,
            'message': str(exc) or "Cannot connect to backend API",
            'suggestion': f"Please ensure the backend API is running on {backend_url}",
        }, status=503)
    if resp.ok:
        return JsonResponse({
            'status': 'ok',
            'backend': 'connected',
            'backendUrl': backend_url,
            'message': "Backend API is reachable",
        })
    return JsonResponse({
        'status': 'error',
        'backend': 'error',
        'backendUrl': backend_url,
        'statusCode': resp.status_code,
        'message': f"Backend API returned status {resp.status_code}",
    }, status=503)


# -------------------------
# Job role listing and search
# -------------------------
def _search_params(request):
    return {key: (request.GET.get(key) or '').strip() for key in SEARCH_PARAM_KEYS}


def _render_role_list(request, result, current_url, search_params, is_search_page):
    meta = result.pagination
    pagination_urls = None
    if meta.total_pages > 1:
        pagination_urls = build_pagination_urls(
            current_url, meta.current_page, meta.total_pages, meta.limit, search_params)
    return render(request, 'jobs/job_role_list.html', {
        'job_roles': result.data,
        'pagination': meta if meta.total_count else None,
        'pagination_urls': pagination_urls,
        'total_roles': meta.total_count,
        'current_url': current_url,
        'is_search_page': is_search_page,
        'search_params': search_params,
        'filter_options': JobRoleService().get_filter_options(),
    })


def _list_or_search(request, current_url, is_search_page):
    check = validate_pagination_params(request.GET.get('page'), request.GET.get('limit'))
    if not check.is_valid:
        return render(request, 'jobs/pagination_error.html', {'message': check.error}, status=400)

    search_params = _search_params(request) if is_search_page else {}
    service = JobRoleService()
    try:
        if is_search_page:
            result = service.search_job_roles(search_params, check.page, check.limit)
        else:
            result = service.get_job_roles_paginated(check.page, check.limit)
    except Exception:
        logger.exception("Error loading job roles for %s", current_url)
        return _error(request, LIST_ERROR_MESSAGE, 500)

    total_pages = result.pagination.total_pages
    if total_pages > 0 and check.page > total_pages:
        return render(request, 'jobs/pagination_error.html', {
            'message': f"Page {check.page} does not exist. There are only {total_pages} pages available.",
        }, status=404)
    return _render_role_list(request, result, current_url, search_params, is_search_page)


@require_GET
def job_role_list(request):
    return _list_or_search(request, '/job-roles', is_search_page=False)


@require_GET
def job_role_search(request):
    return _list_or_search(request, '/jobs/search', is_search_page=True)


# -------------------------
# Job role detail / delete
# -------------------------
@require_http_methods(['GET', 'DELETE'])
def job_role_resource(request, job_role_id):
    if request.method == 'DELETE':
        return job_role_delete_api(request, job_role_id)
    return job_role_detail(request, job_role_id)


def job_role_detail(request, job_role_id):
    role_id = validate_job_role_id(job_role_id)
    if role_id is None:
        return _error(request, INVALID_ID_MESSAGE, 400)
    job_role = JobRoleService().get_job_role(role_id)
    if job_role is None:
        return _error(request, ROLE_NOT_FOUND_MESSAGE, 404)
    return render(request, 'jobs/job_role_detail.html', {
        'job_role': job_role,
        'created': request.GET.get('created') == 'true',
        'updated': request.GET.get('updated') == 'true',
    })


@admin_required
def job_role_delete_api(request, job_role_id):
    role_id = validate_job_role_id(job_role_id)
    if role_id is None:
        return JsonResponse({'success': False, 'message': INVALID_ID_MESSAGE}, status=400)
    try:
        deleted = JobRoleService().delete_job_role(role_id)
    except Exception:
        logger.exception("Error deleting job role %s", role_id)
        return JsonResponse({
            'success': False,
            'message': "Sorry, we couldn't delete the job role at this time. Please try again later.",
        }, status=500)
    if not deleted:
        return JsonResponse({'success': False, 'message': "Job role not found or could not be deleted."}, status=404)
    return JsonResponse({'success': True, 'message': "Job role deleted successfully."})


@require_POST
@admin_required
def job_role_delete(request, job_role_id):
    role_id = validate_job_role_id(job_role_id)
    if role_id is None:
        return _error(request, INVALID_ID_MESSAGE, 400)
    if not JobRoleService().delete_job_role(role_id):
        return _error(request, "Job role not found or could not be deleted.", 404)
    messages.success(request, "Job role deleted successfully.")
    return redirect('/job-roles')


# -------------------------
# Applications
# -------------------------
def _open_role_or_error(request, job_role_id, closed_message):
    """Returns (job_role, None) or (None, error response)."""
    role_id = validate_job_role_id(job_role_id)
    if role_id is None:
        return None, _error(request, INVALID_ID_MESSAGE, 400)
    job_role = JobRoleService().get_job_role(role_id)
    if job_role is None:
        return None, _error(request, ROLE_NOT_FOUND_MESSAGE, 404)
    if not job_role.is_accepting_applications():
        logger.warning("Application refused for job role %s: status=%s positions=%s",
                       role_id, job_role.status, job_role.number_of_open_positions)
        return None, _error(request, closed_message, 400)
    return job_role, None


@require_http_methods(['GET', 'POST'])
def application_form(request, job_role_id):
    if request.method == 'POST':
        return submit_application(request, job_role_id)

    job_role, error = _open_role_or_error(
        request, job_role_id,
        "This job role is not currently accepting applications. "
        "Please check back later or browse other opportunities.")
    if error:
        return error

    initial = {}
    user = session_user(request)
    if user:
        initial = {
            'applicant_name': f"{user.get('forename', '')} {user.get('surname', '')}".strip(),
            'applicant_email': user.get('email', ''),
        }
    return render(request, 'jobs/application_form.html', {
        'job_role': job_role, 'form': ApplicationForm(initial=initial),
    })


def submit_application(request, job_role_id):
    if validate_job_role_id(job_role_id) is None:
        return _error(request, INVALID_ID_MESSAGE, 400)

    form = ApplicationForm(request.POST, request.FILES)
    if not form.is_valid():
        return _error(request, f"Please correct the following errors: {form.error_summary()}", 400,
                      errors=form.errors)

    job_role, error = _open_role_or_error(
        request, job_role_id,
        "This job role is no longer accepting applications. Please browse other opportunities.")
    if error:
        return error

    data = form.cleaned_data
    try:
        application = ApplicationService().submit_application(
            job_role.job_role_id, data['applicant_name'], data['applicant_email'],
            data.get('cover_letter'), data['cv'])
    except BackendUnavailable as exc:
        if "timed out" in exc.message:
            return _error(request, "The request timed out. Please check your connection and try again.", 500)
        return _error(request, "Unable to connect to the application service. "
                               "Please ensure the backend API is running and try again.", 500)
    except BackendError as exc:
        logger.error("Application submission failed for job role %s: %s", job_role.job_role_id, exc)
        return _error(request, exc.message or "Sorry, we couldn't submit your application at this time. "
                                              "Please try again later.", 500)

    return render(request, 'jobs/application_success.html', {'application': application, 'job_role': job_role})


@require_GET
@admin_required
def applicant_list(request, job_role_id):
    role_id = validate_job_role_id(job_role_id)
    if role_id is None:
        return _error(request, INVALID_ID_MESSAGE, 400)

    raw_page = (request.GET.get('page') or '').strip()
    raw_limit = (request.GET.get('limit') or '').strip()
    page = parse_leading_int(raw_page) if raw_page else DEFAULT_PAGE
    limit = parse_leading_int(raw_limit) if raw_limit else APPLICANTS_DEFAULT_LIMIT
    if page is None or limit is None or page < 1 or limit < 1 or limit > APPLICANTS_MAX_LIMIT:
        return _error(request, "Invalid pagination parameters.", 400)

    try:
        result = ApplicationService().get_applicants(role_id, page, limit)
    except NotFound:
        return _error(request, "Job role not found.", 404)
    except BackendError as exc:
        return _error(request, exc.message, 500)

    return render(request, 'jobs/applicants_list.html', {
        'applicants': result.applicants,
        'pagination': result.pagination,
        'job_role': result.job_role,
        'job_role_id': role_id,
    })


def _decide(request, job_role_id, application_id, decision):
    role_id = validate_job_role_id(job_role_id)
    if role_id is None:
        return JsonResponse({'success': False, 'message': "Invalid job role ID provided."}, status=400)
    app_id = validate_job_role_id(application_id)
    if app_id is None:
        return JsonResponse({'success': False, 'message': "Invalid application ID provided."}, status=400)

    payload = request.POST
    if request.content_type == 'application/json':
        try:
            payload = json.loads(request.body or b'{}')
        except ValueError:
            payload = {}
    form = ApplicantDecisionForm(payload)
    reason = form.cleaned_data.get('reason') if form.is_valid() else None
    service = ApplicationService()
    action = service.accept_applicant if decision == APPLICATION_STATUS_ACCEPTED else service.reject_applicant
    try:
        outcome = action(app_id, role_id, reason or None)
    except BackendError as exc:
        logger.error("Could not mark application %s as %s: %s", app_id, decision, exc)
        return JsonResponse({'success': False, 'message': exc.message}, status=500)

    notify_applicant(outcome.get('application'), None, decision, reason or '')
    verb = 'accepted' if decision == APPLICATION_STATUS_ACCEPTED else 'rejected'
    return JsonResponse({'success': True, 'message': f"Applicant {verb} successfully"})


@require_POST
@admin_required
def accept_applicant(request, job_role_id, application_id):
    return _decide(request, job_role_id, application_id, APPLICATION_STATUS_ACCEPTED)


@require_POST
@admin_required
def reject_applicant(request, job_role_id, application_id):
    return _decide(request, job_role_id, application_id, APPLICATION_STATUS_REJECTED)


@require_GET
@admin_required
def download_cv(request, application_id):
    app_id = validate_job_role_id(application_id)
    if app_id is None:
        return _error(request, "Invalid application ID provided.", 400)
    try:
        cv = ApplicationService().download_cv(app_id)
    except NotFound:
        return HttpResponse("CV not found for this application", status=404, content_type='text/plain')
    except BackendError as exc:
        return HttpResponse(exc.message, status=500, content_type='text/plain')

    resp = HttpResponse(cv.content, content_type=cv.mime_type)
    resp['Content-Disposition'] = f'attachment; filename="{cv.file_name}"'
    resp['Content-Length'] = str(len(cv.content))
    return resp


@require_GET
@login_required
def my_applications(request):
    user = session_user(request)
    try:
        applications = ApplicationService().get_user_applications(user.get('email'))
    except BackendError as exc:
        logger.error("Could not load applications for %s: %s", user.get('email'), exc)
        return _error(request, "Sorry, we couldn't load your applications at this time. Please try again later.", 500)
    return render(request, 'jobs/my_applications.html', {'applications': applications})


# -------------------------
# Admin: create / edit / export
# -------------------------
@require_GET
@admin_required
def job_role_create(request):
    return render(request, 'jobs/job_role_create.html', {'form': JobRoleForm()})


@require_POST
@admin_required
def job_role_create_submit(request):
    form = JobRoleForm(request.POST)
    if not form.is_valid():
        return render(request, 'jobs/job_role_create.html', {
            'form': form, 'error': form.first_error(),
        }, status=400)
    try:
        created = JobRoleService().create_job_role(form.to_input())
    except BackendError as exc:
        return render(request, 'jobs/job_role_create.html', {
            'form': form,
            'error': exc.message or "Sorry, we couldn't create the job role at this time. Please try again later.",
        }, status=500)
    return redirect(f'/job-roles/{created.job_role_id}?created=true')


@require_GET
@admin_required
def job_role_edit(request, job_role_id):
    role_id = validate_job_role_id(job_role_id)
    if role_id is None:
        return _error(request, INVALID_ID_MESSAGE, 400)
    job_role = JobRoleService().get_job_role(role_id)
    if job_role is None:
        return _error(request, ROLE_NOT_FOUND_MESSAGE, 404)
    form = JobRoleForm(initial=job_role.as_form_initial(), is_update=True)
    return render(request, 'jobs/job_role_edit.html', {'form': form, 'job_role': job_role})


@require_POST
@admin_required
def job_role_update(request, job_role_id):
    role_id = validate_job_role_id(job_role_id)
    if role_id is None:
        return _error(request, INVALID_ID_MESSAGE, 400)
    form = JobRoleForm(request.POST, is_update=True)
    context = {'form': form, 'job_role': {'job_role_id': role_id}}
    if not form.is_valid():
        context['error'] = form.first_error()
        return render(request, 'jobs/job_role_edit.html', context, status=400)
    try:
        updated = JobRoleService().update_job_role(role_id, form.to_input())
    except NotFound:
        return _error(request, ROLE_NOT_FOUND_MESSAGE, 404)
    except BackendError as exc:
        context['error'] = exc.message or "Sorry, we couldn't update the job role at this time. Please try again later."
        return render(request, 'jobs/job_role_edit.html', context, status=500)
    return redirect(f'/job-roles/{updated.job_role_id or role_id}?updated=true')


@require_GET
@admin_required
def export_job_roles(request):
    job_roles = JobRoleService().get_all_job_roles_for_export()
    if not job_roles:
        return _error(request, "No job roles available to export. "
                               "Please ensure the backend is running and has data.", 404)
    logger.info("Exporting %d job role(s) to CSV", len(job_roles))
    filename = generate_csv_filename('job-roles-export')
    resp = HttpResponse(job_roles_to_csv(job_roles), content_type='text/csv')
    resp['Content-Disposition'] = f'attachment; filename="{filename}"'
    return resp
