# jobs/tests/test_services.py
from unittest import mock

import requests
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import SimpleTestCase, override_settings

from jobs.models import JobRoleInput
from jobs.services import (
    ApplicationService, BackendClient, BackendError, BackendUnavailable, JobRoleService, NotFound,
)

from .helpers import backend_role, make_response

BASE = 'http://api.test'


def client_with(session):
    return BackendClient(base_url=BASE, timeout=5, session=session)


def role_input():
    return JobRoleInput(
        role_name='Software Engineer', description='Build things for clients.',
        responsibilities='Write and review code.', job_spec_link='https://example.com/spec',
        location='Remote', capability='Engineering', band='Mid', closing_date='2030-01-31',
        status='Open', number_of_open_positions=1,
    )


class JobRoleServiceTest(SimpleTestCase):
    def setUp(self):
        self.session = mock.Mock()
        self.service = JobRoleService(client_with(self.session))

    def test_get_job_roles_maps_backend_records(self):
        self.session.request.return_value = make_response(body={
            'success': True,
            'data': {'jobRoles': [backend_role(1, status='OPEN'), backend_role(2, status='on hold')]},
        })
        roles = self.service.get_job_roles()
        self.session.request.assert_called_once_with(
            'GET', f'{BASE}/api/job-roles', params={'limit': 100}, timeout=5)
        self.assertEqual([r.job_role_id for r in roles], [1, 2])
        self.assertEqual(roles[0].role_name, 'Software Engineer')
        self.assertEqual([r.status for r in roles], ['Open', 'Closed'])

    @override_settings(ENABLE_MOCK_DATA=True)
    def test_get_job_roles_falls_back_to_local_data(self):
        self.session.request.side_effect = requests.ConnectionError('refused')
        roles = self.service.get_job_roles()
        self.assertEqual(len(roles), 8)
        self.assertEqual(roles[0].role_name, 'Software Engineer')

    @override_settings(ENABLE_MOCK_DATA=False)
    def test_get_job_roles_unreachable_without_local_data(self):
        self.session.request.side_effect = requests.ConnectionError('refused')
        self.assertEqual(self.service.get_job_roles(), [])

    def test_get_job_roles_server_error(self):
        self.session.request.return_value = make_response(status=500, body={'message': 'boom'})
        self.assertEqual(self.service.get_job_roles(), [])

    def test_paginated_uses_backend_meta(self):
        self.session.request.return_value = make_response(body={'success': True, 'data': {
            'jobRoles': [backend_role(3)],
            'pagination': {'currentPage': 2, 'totalPages': 5, 'totalCount': 50, 'limit': 10,
                           'hasNext': True, 'hasPrevious': True},
        }})
        result = self.service.get_job_roles_paginated(2, 10)
        self.assertEqual(len(result.data), 1)
        self.assertEqual(result.pagination.total_pages, 5)

    def test_paginated_error_gives_empty_page(self):
        self.session.request.return_value = make_response(status=502)
        result = self.service.get_job_roles_paginated(3, 12)
        self.assertEqual(result.data, [])
        self.assertEqual(result.pagination.current_page, 3)
        self.assertEqual(result.pagination.total_count, 0)

    def test_search_drops_blank_params(self):
        self.session.request.return_value = make_response(body={'success': True, 'data': {'jobRoles': []}})
        self.service.search_job_roles({'search': ' eng ', 'band': '', 'location': 'Remote'}, 1, 12)
        _, kwargs = self.session.request.call_args
        self.assertEqual(kwargs['params'], {'page': 1, 'limit': 12, 'search': 'eng', 'location': 'Remote'})

    @override_settings(ENABLE_MOCK_DATA=True)
    def test_search_falls_back_to_local_filtering(self):
        self.session.request.side_effect = requests.Timeout()
        result = self.service.search_job_roles({'search': 'engineer'}, 1, 12)
        self.assertEqual(result.pagination.total_count, 4)

        result = self.service.search_job_roles({'search': 'engineer', 'status': 'Open'}, 1, 12)
        self.assertEqual(result.pagination.total_count, 3)

        result = self.service.search_job_roles({'search': 'engineer', 'band': 'Senior'}, 1, 1)
        self.assertEqual(result.pagination.total_count, 2)
        self.assertEqual(result.pagination.total_pages, 2)
        self.assertEqual(len(result.data), 1)

    def test_get_job_role(self):
        self.session.request.return_value = make_response(body={'success': True, 'data': backend_role(7)})
        role = self.service.get_job_role(7)
        self.assertEqual(role.job_role_id, 7)
        self.assertTrue(role.is_accepting_applications())

    def test_get_job_role_invalid_id_skips_backend(self):
        self.assertIsNone(self.service.get_job_role(0))
        self.assertIsNone(self.service.get_job_role('3'))
        self.session.request.assert_not_called()

    def test_get_job_role_not_found(self):
        self.session.request.return_value = make_response(status=404)
        self.assertIsNone(self.service.get_job_role(99))

    def test_create_reports_backend_message(self):
        self.session.request.return_value = make_response(status=400, body={'message': 'Duplicate role name'})
        with self.assertRaisesMessage(BackendError, 'Duplicate role name'):
            self.service.create_job_role(role_input())
        _, kwargs = self.session.request.call_args
        self.assertEqual(kwargs['json']['jobRoleName'], 'Software Engineer')

    def test_update_not_found(self):
        self.session.request.return_value = make_response(status=404)
        with self.assertRaisesMessage(NotFound, 'Job role not found'):
            self.service.update_job_role(5, role_input())

    def test_delete(self):
        self.session.request.return_value = make_response(status=204, content=b'')
        self.assertTrue(self.service.delete_job_role(5))
        self.session.request.return_value = make_response(status=404)
        self.assertFalse(self.service.delete_job_role(5))

    def test_filter_options_default_on_failure(self):
        self.session.request.side_effect = requests.ConnectionError()
        options = self.service.get_filter_options()
        self.assertEqual(options.bands, ['Junior', 'Mid', 'Senior'])
        self.assertIn('Remote', options.locations)
        self.assertEqual(len(options.capabilities), 7)

    def test_export_walks_all_pages(self):
        self.session.request.side_effect = [
            make_response(body={'success': True, 'data': {
                'jobRoles': [backend_role(1)], 'pagination': {'hasNext': True}}}),
            make_response(body={'success': True, 'data': {
                'jobRoles': [backend_role(2)], 'pagination': {'hasNext': False}}}),
        ]
        roles = self.service.get_all_job_roles_for_export()
        self.assertEqual([r.job_role_id for r in roles], [1, 2])
        pages = [c.kwargs['params']['page'] for c in self.session.request.call_args_list]
        self.assertEqual(pages, [1, 2])


class ApplicationServiceTest(SimpleTestCase):
    def setUp(self):
        self.session = mock.Mock()
        self.service = ApplicationService(client_with(self.session))

    def applications(self, count, role=None):
        return [{
            'id': i + 1, 'jobRoleId': 4, 'applicantName': f'Applicant {i + 1}',
            'applicantEmail': f'a{i + 1}@example.com', 'status': 'pending',
            'submittedAt': '2025-10-20T10:00:00Z', 'jobRole': role,
        } for i in range(count)]

    def test_submit_requires_cv(self):
        with self.assertRaisesMessage(BackendError, 'CV file is required'):
            self.service.submit_application(4, 'Jane Doe', 'jane@example.com', '', None)

    def test_submit_sends_multipart(self):
        self.session.request.return_value = make_response(status=201, body={'success': True, 'data': {
            'id': 11, 'jobRoleId': 4, 'applicantName': 'Jane Doe', 'applicantEmail': 'jane@example.com',
            'status': 'pending', 'submittedAt': '2025-10-20T10:00:00Z',
        }})
        upload = SimpleUploadedFile('cv.pdf', b'%PDF-1.4', content_type='application/pdf')
        application = self.service.submit_application(4, 'Jane Doe', 'jane@example.com', 'Hello', upload)
        self.assertEqual(application.application_id, 11)
        args, kwargs = self.session.request.call_args
        self.assertEqual(args, ('POST', f'{BASE}/api/applications'))
        self.assertEqual(kwargs['data']['coverLetter'], 'Hello')
        self.assertEqual(kwargs['files']['cv'], ('cv.pdf', b'%PDF-1.4', 'application/pdf'))

    def test_submit_backend_error_message(self):
        self.session.request.return_value = make_response(status=400, body={'message': 'Invalid application data'})
        upload = SimpleUploadedFile('cv.pdf', b'%PDF-1.4', content_type='application/pdf')
        with self.assertRaisesMessage(BackendError, 'Backend API error (400): Invalid application data'):
            self.service.submit_application(4, 'Jane Doe', 'jane@example.com', '', upload)

    def test_submit_unreachable(self):
        self.session.request.side_effect = requests.ConnectionError()
        upload = SimpleUploadedFile('cv.pdf', b'%PDF-1.4', content_type='application/pdf')
        with self.assertRaisesMessage(BackendUnavailable, 'Unable to connect to the backend API'):
            self.service.submit_application(4, 'Jane Doe', 'jane@example.com', '', upload)

    def test_applicants_paginated_locally(self):
        role = {'id': 4, 'jobRoleName': 'Data Analyst', 'status': 'open'}
        self.session.request.return_value = make_response(body={'success': True, 'data': self.applications(12, role)})
        page = self.service.get_applicants(4, page=3, limit=5)
        self.assertEqual([a.application_id for a in page.applicants], [11, 12])
        self.assertEqual(page.pagination.total_pages, 3)
        self.assertEqual(page.pagination.total_applicants, 12)
        self.assertFalse(page.pagination.has_next_page)
        self.assertTrue(page.pagination.has_previous_page)
        self.assertEqual(page.job_role['role_name'], 'Data Analyst')

    def test_applicants_unknown_role_summary(self):
        self.session.request.return_value = make_response(body={'success': True, 'data': []})
        page = self.service.get_applicants(4)
        self.assertEqual(page.job_role, {'id': 4, 'role_name': 'Unknown Job Role', 'status': 'unknown'})
        self.assertEqual(page.pagination.total_pages, 0)

    def test_applicants_error_messages(self):
        cases = (
            (404, NotFound, 'Job role not found'),
            (400, BackendError, 'Invalid parameters provided'),
            (503, BackendError, 'Backend server error. Please try again later.'),
        )
        for status, exc_class, message in cases:
            self.session.request.return_value = make_response(status=status)
            with self.assertRaisesMessage(exc_class, message):
                self.service.get_applicants(4)

    def test_applicants_unreachable(self):
        self.session.request.side_effect = requests.ConnectionError()
        with self.assertRaisesMessage(BackendUnavailable, f'API server is running on {BASE}'):
            self.service.get_applicants(4)

    def test_accept_sends_status_update(self):
        self.session.request.return_value = make_response(body={
            'success': True, 'message': 'Application accepted successfully',
            'data': {'id': 1, 'status': 'accepted', 'applicantEmail': 'a1@example.com'},
        })
        outcome = self.service.accept_applicant(1, 4, 'Great candidate')
        args, kwargs = self.session.request.call_args
        self.assertEqual(args, ('PUT', f'{BASE}/api/applications/1/status'))
        self.assertEqual(kwargs['json'], {'status': 'accepted', 'jobRoleId': 4, 'reason': 'Great candidate'})
        self.assertEqual(outcome['status'], 'accepted')
        self.assertEqual(outcome['application'].applicant_email, 'a1@example.com')

    def test_reject_not_found(self):
        self.session.request.return_value = make_response(status=404)
        with self.assertRaises(NotFound):
            self.service.reject_applicant(999, 4)

    def test_download_cv(self):
        self.session.request.return_value = make_response(content=b'%PDF', headers={
            'Content-Type': 'application/pdf',
            'Content-Disposition': 'attachment; filename="jane-cv.pdf"',
        })
        cv = self.service.download_cv(3)
        self.assertEqual(cv.file_name, 'jane-cv.pdf')
        self.assertEqual(cv.mime_type, 'application/pdf')
        self.assertEqual(cv.content, b'%PDF')

    def test_download_cv_missing(self):
        self.session.request.return_value = make_response(status=404)
        with self.assertRaisesMessage(NotFound, 'CV not found'):
            self.service.download_cv(3)

    def test_user_applications(self):
        self.session.request.return_value = make_response(body={'success': True, 'data': [
            {'id': 1, 'jobRoleId': 101, 'applicantName': 'John Doe', 'applicantEmail': 'john@example.com',
             'status': 'pending', 'submittedAt': '2025-10-20T10:00:00Z',
             'jobRole': {'id': 101, 'jobRoleName': 'Software Engineer'}},
        ]})
        apps = self.service.get_user_applications('john@example.com')
        args, _ = self.session.request.call_args
        self.assertEqual(args[1], f'{BASE}/api/applications/user/john%40example.com')
        self.assertEqual(apps[0].job_role_name, 'Software Engineer')

    def test_user_applications_requires_email(self):
        with self.assertRaises(BackendError):
            self.service.get_user_applications('')
