# jobs/tests/helpers.py
import json

import requests
from django.conf import settings

from jobs.models import Application, JobRole, JobRoleDetail

ADMIN_USER = {'user_id': 1, 'email': 'admin@example.com', 'forename': 'Ada', 'surname': 'Admin', 'role': 'Admin'}
APPLICANT_USER = {'user_id': 2, 'email': 'jane@example.com', 'forename': 'Jane', 'surname': 'Doe', 'role': 'User'}


def login_as(client, user):
    """Store an authenticated user in the client's signed-cookie session."""
    session = client.session
    session['is_authenticated'] = True
    session['user'] = dict(user)
    session.save()
    client.cookies[settings.SESSION_COOKIE_NAME] = session.session_key


def make_response(status=200, body=None, headers=None, content=None, url='http://api.test/'):
    resp = requests.Response()
    resp.status_code = status
    if content is not None:
        resp._content = content
    else:
        resp._content = json.dumps(body if body is not None else {}).encode('utf-8')
        resp.headers['Content-Type'] = 'application/json'
    resp.headers.update(headers or {})
    resp.url = url
    return resp


def backend_role(role_id=1, name='Software Engineer', status='open', **overrides):
    data = {
        'id': role_id,
        'jobRoleName': name,
        'description': 'Build and run services for clients.',
        'responsibilities': 'Write code, review code, ship code.',
        'jobSpecLink': 'https://example.com/spec',
        'location': 'Belfast, Northern Ireland',
        'capability': 'Engineering',
        'band': 'Junior',
        'closingDate': '2030-01-31',
        'status': status,
        'numberOfOpenPositions': 2,
    }
    data.update(overrides)
    return data


def job_role(role_id=1, name='Software Engineer', location='Belfast, Northern Ireland', band='Junior', **kw):
    defaults = dict(capability='Engineering', closing_date='2030-01-31', status='Open', number_of_open_positions=2)
    defaults.update(kw)
    return JobRole(job_role_id=role_id, role_name=name, location=location, band=band, **defaults)


def job_role_detail(role_id=1, status='Open', positions=2):
    return JobRoleDetail.from_backend(backend_role(role_id, status=status, numberOfOpenPositions=positions))


def application(app_id=7, **overrides):
    data = {
        'id': app_id, 'jobRoleId': 1, 'applicantName': 'Jane Doe', 'applicantEmail': 'jane@example.com',
        'status': 'pending', 'submittedAt': '2025-10-20T10:00:00Z',
    }
    data.update(overrides)
    return Application.from_backend(data)
