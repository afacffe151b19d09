# jobs/services.py
"""
Clients for the job roles backend API.

Every call goes through ``BackendClient``, which owns the ``requests``
session, the base URL and the timeout. When the backend cannot be reached
and ``ENABLE_MOCK_DATA`` is on, job role reads are answered from the bundled
JSON file instead.
"""
import json
import logging
import re
from functools import lru_cache
from urllib.parse import quote

import requests
from django.conf import settings

from .constants import VALID_BANDS, VALID_CAPABILITIES, VALID_LOCATIONS
from .filtering import FilterCriteria, filter_job_roles
from .models import (
    ApplicantsPage, ApplicantsPagination, Application, CvFile, FilterOptions,
    JobRole, JobRoleDetail,
)
from .pagination import DEFAULT_LIMIT, DEFAULT_PAGE, PaginatedResult, PaginationMeta, paginate_list

logger = logging.getLogger(__name__)

EXPORT_PAGE_SIZE = 100
EXPORT_MAX_PAGES = 1000

_FILENAME_RE = re.compile(r'filename\*?=(?:UTF-8\'\')?"?([^";]+)"?', re.IGNORECASE)


class BackendError(Exception):
    """The backend answered with an error, or could not be used."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class BackendUnavailable(BackendError):
    """Connection refused or timed out."""


class NotFound(BackendError):
    pass


def _response_message(response, default=None):
    try:
        body = response.json()
    except ValueError:
        return default
    if isinstance(body, dict):
        return body.get('message') or body.get('error') or default
    return default


class BackendClient:
    def __init__(self, base_url=None, timeout=None, session=None):
        self.base_url = (base_url or settings.API_BASE_URL).rstrip('/')
        self.timeout = timeout if timeout is not None else settings.API_TIMEOUT
        self.session = session or requests.Session()

    def request(self, method, path, **kwargs):
        """
        Send one request and return the response.
        Non-2xx responses raise ``requests.HTTPError``; connection problems
        raise ``BackendUnavailable``.
        """
        kwargs.setdefault('timeout', self.timeout)
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, **kwargs)
        except requests.Timeout as exc:
            raise BackendUnavailable("Request timed out. The backend API may be slow or unresponsive.") from exc
        except requests.ConnectionError as exc:
            raise BackendUnavailable(
                "Unable to connect to the backend API. Please ensure the API server is running on "
                + self.base_url) from exc
        response.raise_for_status()
        return response

    def get_data(self, path, method='GET', **kwargs):
        """Send a request and unwrap the ``{"success": ..., "data": ...}`` envelope."""
        body = self.request(method, path, **kwargs).json()
        return body.get('data') if isinstance(body, dict) else None


# -------------------------
# Local fallback data
# -------------------------
@lru_cache(maxsize=4)
def _read_mock_file(path):
    with open(path, encoding='utf-8') as fh:
        return json.load(fh)


def load_mock_job_roles():
    """Raw backend-shaped job role records from ``MOCK_DATA_PATH``."""
    try:
        return list(_read_mock_file(str(settings.MOCK_DATA_PATH)))
    except (OSError, ValueError):
        logger.exception("Could not read mock job role data from %s", settings.MOCK_DATA_PATH)
        return []


def _matches_exact(value, wanted):
    return not wanted or (value or '').lower() == wanted.lower()


def search_mock_job_roles(params, page, limit):
    roles = [JobRole.from_backend(r) for r in load_mock_job_roles()]
    roles = filter_job_roles(roles, FilterCriteria.from_query_dict(params))
    roles = [
        r for r in roles
        if _matches_exact(r.capability, (params.get('capability') or '').strip())
        and _matches_exact(r.status, (params.get('status') or '').strip())
    ]
    return paginate_list(roles, page, limit)


class JobRoleService:
    def __init__(self, client=None):
        self.client = client or BackendClient()

    @property
    def use_mock_data(self):
        return settings.ENABLE_MOCK_DATA

    def _role_list(self, data):
        return [JobRole.from_backend(r) for r in (data or {}).get('jobRoles', [])]

    def _paginated(self, data, page, limit):
        data = data or {}
        meta = data.get('pagination')
        return PaginatedResult(
            data=self._role_list(data),
            pagination=PaginationMeta.from_backend(meta) if meta else PaginationMeta.empty(page, limit),
        )

    def get_job_roles(self):
        try:
            return self._role_list(self.client.get_data('/api/job-roles', params={'limit': 100}))
        except BackendUnavailable:
            if self.use_mock_data:
                logger.warning("Backend unavailable, serving job roles from local data")
                return [JobRole.from_backend(r) for r in load_mock_job_roles()]
            logger.error("Error fetching job roles: backend unavailable")
            return []
        except (requests.RequestException, ValueError, AttributeError):
            logger.exception("Error fetching job roles")
            return []

    def get_job_roles_paginated(self, page=DEFAULT_PAGE, limit=DEFAULT_LIMIT):
        try:
            data = self.client.get_data('/api/job-roles', params={'page': page, 'limit': limit})
            return self._paginated(data, page, limit)
        except BackendUnavailable:
            if self.use_mock_data:
                logger.warning("Backend unavailable, paginating local job role data")
                return search_mock_job_roles({}, page, limit)
            logger.error("Error fetching paginated job roles: backend unavailable")
        except (requests.RequestException, ValueError, AttributeError):
            logger.exception("Error fetching paginated job roles")
        return PaginatedResult(data=[], pagination=PaginationMeta.empty(page, limit))

    def search_job_roles(self, params, page=DEFAULT_PAGE, limit=DEFAULT_LIMIT):
        """
        Search by role name plus optional capability/location/band/status.
        Blank values are not sent.
        """
        query = {'page': page, 'limit': limit}
        for key in ('search', 'capability', 'location', 'band', 'status'):
            value = (params.get(key) or '').strip()
            if value:
                query[key] = value
        try:
            data = self.client.get_data('/api/job-roles/search', params=query)
            return self._paginated(data, page, limit)
        except BackendUnavailable:
            if self.use_mock_data:
                logger.warning("Backend unavailable, searching local job role data")
                return search_mock_job_roles(params, page, limit)
            logger.error("Error searching job roles: backend unavailable")
        except (requests.RequestException, ValueError, AttributeError):
            logger.exception("Error searching job roles")
        return PaginatedResult(data=[], pagination=PaginationMeta.empty(page, limit))

    def get_job_role(self, job_role_id):
        if not isinstance(job_role_id, int) or isinstance(job_role_id, bool) or job_role_id <= 0:
            return None
        try:
            data = self.client.get_data(f'/api/job-roles/{job_role_id}')
        except BackendUnavailable:
            if not self.use_mock_data:
                logger.error("Error fetching job role %s: backend unavailable", job_role_id)
                return None
            logger.warning("Backend unavailable, looking up job role %s in local data", job_role_id)
            for raw in load_mock_job_roles():
                if raw.get('id') == job_role_id:
                    return JobRoleDetail.from_backend(raw)
            return None
        except requests.HTTPError as exc:
            if exc.response is not None and exc.response.status_code == 404:
                return None
            logger.exception("Error fetching job role %s", job_role_id)
            return None
        except (requests.RequestException, ValueError, AttributeError):
            logger.exception("Error fetching job role %s", job_role_id)
            return None
        return JobRoleDetail.from_backend(data) if data else None

    def create_job_role(self, job_role_input):
        try:
            data = self.client.get_data(
                '/api/job-roles', method='POST', json=job_role_input.to_backend())
        except requests.HTTPError as exc:
            logger.error("Error creating job role: %s", exc)
            raise BackendError(
                _response_message(exc.response, "Failed to create job role"),
                status_code=exc.response.status_code if exc.response is not None else None) from exc
        except BackendError:
            logger.exception("Error creating job role")
            raise BackendError("Failed to create job role") from None
        except (requests.RequestException, ValueError) as exc:
            logger.exception("Error creating job role")
            raise BackendError("Failed to create job role") from exc
        logger.info("Created job role %s", (data or {}).get('id'))
        return JobRoleDetail.from_backend(data or {})

    def update_job_role(self, job_role_id, job_role_input):
        if not isinstance(job_role_id, int) or job_role_id <= 0:
            raise BackendError("Invalid job role ID")
        try:
            data = self.client.get_data(
                f'/api/job-roles/{job_role_id}', method='PUT', json=job_role_input.to_backend())
        except requests.HTTPError as exc:
            logger.error("Error updating job role %s: %s", job_role_id, exc)
            status = exc.response.status_code if exc.response is not None else None
            if status == 404:
                raise NotFound("Job role not found", status_code=404) from exc
            raise BackendError(
                _response_message(exc.response, "Failed to update job role"), status_code=status) from exc
        except BackendError:
            logger.exception("Error updating job role %s", job_role_id)
            raise BackendError("Failed to update job role") from None
        except (requests.RequestException, ValueError) as exc:
            logger.exception("Error updating job role %s", job_role_id)
            raise BackendError("Failed to update job role") from exc
        logger.info("Updated job role %s", job_role_id)
        return JobRoleDetail.from_backend(data or {})

    def delete_job_role(self, job_role_id):
        try:
            self.client.request('DELETE', f'/api/job-roles/{job_role_id}')
        except (BackendError, requests.RequestException):
            logger.exception("Error deleting job role %s", job_role_id)
            return False
        logger.info("Deleted job role %s", job_role_id)
        return True

    def get_filter_options(self):
        try:
            return FilterOptions(
                capabilities=self.client.get_data('/api/job-roles/capabilities') or [],
                locations=self.client.get_data('/api/job-roles/locations') or [],
                bands=self.client.get_data('/api/job-roles/bands') or [],
            )
        except (BackendError, requests.RequestException, ValueError):
            logger.warning("Error fetching filter options, using defaults", exc_info=True)
            return FilterOptions(
                capabilities=list(VALID_CAPABILITIES),
                locations=list(VALID_LOCATIONS),
                bands=list(VALID_BANDS),
            )

    def get_all_job_roles_for_export(self):
        """Walk every backend page; falls back to ``get_job_roles`` on error."""
        roles = []
        page = 1
        try:
            while True:
                data = self.client.get_data(
                    '/api/job-roles', params={'page': page, 'limit': EXPORT_PAGE_SIZE}) or {}
                roles.extend(self._role_list(data))
                if not (data.get('pagination') or {}).get('hasNext'):
                    break
                page += 1
                if page > EXPORT_MAX_PAGES:
                    logger.warning(
                        "Reached maximum page limit (%d) while fetching job roles for export",
                        EXPORT_MAX_PAGES)
                    break
        except (BackendError, requests.RequestException, ValueError, AttributeError):
            logger.exception("Error fetching all job roles for export, trying standard limit")
            return self.get_job_roles()
        return roles


def _applicant_error(exc):
    """Translate a failed applicants request into the message shown to admins."""
    if isinstance(exc, BackendUnavailable):
        if isinstance(exc.__cause__, requests.Timeout):
            return BackendUnavailable("Request timeout. The backend API may be slow to respond.")
        return exc
    response = getattr(exc, 'response', None)
    status = response.status_code if response is not None else None
    if status == 404:
        return NotFound("Job role not found", status_code=404)
    if status == 400:
        return BackendError("Invalid parameters provided", status_code=400)
    if status is not None and status >= 500:
        return BackendError("Backend server error. Please try again later.", status_code=status)
    if response is not None:
        return BackendError(
            _response_message(response, "An error occurred while fetching applicants"), status_code=status)
    return BackendError("An unexpected error occurred while fetching applicants")


class ApplicationService:
    def __init__(self, client=None):
        self.client = client or BackendClient()

    def submit_application(self, job_role_id, applicant_name, applicant_email, cover_letter, cv_file):
        """
        Send the application as multipart form data. ``cv_file`` is a Django
        ``UploadedFile``.
        """
        if not cv_file:
            raise BackendError("CV file is required")
        data = {
            'jobRoleId': str(job_role_id),
            'applicantName': applicant_name,
            'applicantEmail': applicant_email,
        }
        if cover_letter:
            data['coverLetter'] = cover_letter
        cv_file.seek(0)
        files = {'cv': (cv_file.name, cv_file.read(), getattr(cv_file, 'content_type', None))}
        try:
            body = self.client.request('POST', '/api/applications', data=data, files=files).json()
        except BackendUnavailable:
            logger.error("Failed to submit application for job role %s: backend unavailable", job_role_id)
            raise
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else 'unknown'
            message = _response_message(exc.response, "Unknown error occurred")
            logger.error("Failed to submit application for job role %s: %s %s", job_role_id, status, message)
            raise BackendError(f"Backend API error ({status}): {message}", status_code=status) from exc
        except requests.RequestException as exc:
            logger.exception("Failed to submit application for job role %s", job_role_id)
            raise BackendError(
                "No response from backend API. Please check if the API server is running.") from exc
        except ValueError as exc:
            raise BackendError("Application submission failed") from exc

        if not isinstance(body, dict) or not body.get('success'):
            raise BackendError("Application submission failed")
        logger.info("Application submitted for job role %s", job_role_id)
        return Application.from_backend(body.get('data') or {})

    def get_applicants(self, job_role_id, page=1, limit=10):
        """
        One page of applicants for a role. The backend returns the full
        list, so paging happens here.
        """
        try:
            body = self.client.request('GET', f'/api/applications/job-role/{job_role_id}').json()
        except (BackendError, requests.RequestException) as exc:
            logger.error("Failed to fetch applicants for job role %s: %s", job_role_id, exc)
            translated = _applicant_error(exc)
            if translated is exc:
                raise
            raise translated from exc
        except ValueError as exc:
            raise BackendError("Failed to fetch applicants") from exc
        if not isinstance(body, dict) or not body.get('success'):
            raise BackendError("Failed to fetch applicants")

        everyone = body.get('data') or []
        total = len(everyone)
        total_pages = (total + limit - 1) // limit
        start = (page - 1) * limit
        applicants = [Application.from_backend(a) for a in everyone[start:start + limit]]

        role = (everyone[0].get('jobRole') if everyone else None) or None
        if role:
            summary = {'id': role.get('id'), 'role_name': role.get('jobRoleName'), 'status': role.get('status')}
        else:
            summary = {'id': job_role_id, 'role_name': 'Unknown Job Role', 'status': 'unknown'}

        return ApplicantsPage(
            applicants=applicants,
            pagination=ApplicantsPagination(
                current_page=page,
                total_pages=total_pages,
                total_applicants=total,
                applicants_per_page=limit,
                has_next_page=page < total_pages,
                has_previous_page=page > 1,
            ),
            job_role=summary,
        )

    def _set_status(self, application_id, job_role_id, status, reason):
        payload = {'status': status, 'jobRoleId': job_role_id, 'reason': reason}
        try:
            body = self.client.request(
                'PUT', f'/api/applications/{application_id}/status', json=payload).json()
        except requests.HTTPError as exc:
            code = exc.response.status_code if exc.response is not None else None
            logger.error("Failed to mark application %s as %s: %s", application_id, status, exc)
            if code == 404:
                raise NotFound("Application not found", status_code=404) from exc
            raise BackendError(
                _response_message(exc.response, "Failed to update application status"),
                status_code=code) from exc
        except requests.RequestException as exc:
            raise BackendError("Failed to update application status") from exc
        except ValueError:
            body = {}
        logger.info("Application %s marked as %s", application_id, status)
        data = body.get('data') if isinstance(body, dict) else None
        return {
            'application_id': (data or {}).get('id', application_id),
            'status': (data or {}).get('status', status),
            'message': (body.get('message') if isinstance(body, dict) else None)
            or f"Application {status} successfully",
            'application': Application.from_backend(data) if data else None,
        }

    def accept_applicant(self, application_id, job_role_id, reason=None):
        return self._set_status(application_id, job_role_id, 'accepted', reason)

    def reject_applicant(self, application_id, job_role_id, reason=None):
        return self._set_status(application_id, job_role_id, 'rejected', reason)

    def download_cv(self, application_id):
        try:
            response = self.client.request('GET', f'/api/applications/{application_id}/cv')
        except requests.HTTPError as exc:
            if exc.response is not None and exc.response.status_code == 404:
                raise NotFound("CV not found", status_code=404) from exc
            logger.error("Failed to download CV for application %s: %s", application_id, exc)
            raise BackendError("Failed to download CV") from exc
        except requests.RequestException as exc:
            raise BackendError("Failed to download CV") from exc

        disposition = response.headers.get('Content-Disposition', '')
        m = _FILENAME_RE.search(disposition)
        file_name = m.group(1) if m else f'cv-{application_id}'
        return CvFile(
            content=response.content,
            file_name=file_name,
            mime_type=response.headers.get('Content-Type', 'application/octet-stream'),
        )

    def get_user_applications(self, email):
        if not email:
            raise BackendError("Email is required")
        try:
            data = self.client.get_data(f'/api/applications/user/{quote(email, safe="")}')
        except requests.HTTPError as exc:
            logger.error("Failed to fetch applications for %s: %s", email, exc)
            raise BackendError(
                _response_message(exc.response, "Failed to fetch your applications")) from exc
        except requests.RequestException as exc:
            raise BackendError("Failed to fetch your applications") from exc
        return [Application.from_backend(a) for a in (data or [])]
