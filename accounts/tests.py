# accounts/tests.py
from unittest import mock

import requests
from django.test import Client, RequestFactory, SimpleTestCase

from jobs.services import BackendClient
from jobs.tests.helpers import ADMIN_USER, APPLICANT_USER, login_as, make_response

from .context_processors import PROFILE_COLORS, profile_color
from .decorators import admin_required, login_required
from .forms import LoginForm, RegisterForm, password_errors
from .services import AuthError, AuthService

BASE = 'http://api.test'

BACKEND_USER = {'userId': 2, 'email': 'jane@example.com', 'forename': 'Jane', 'surname': 'Doe', 'role': 'User'}


def register_data(**overrides):
    data = {'email': 'jane@example.com', 'password': 'Secret#123', 'forename': 'Jane', 'surname': 'Doe'}
    data.update(overrides)
    return data


class PasswordRulesTest(SimpleTestCase):
    def test_valid(self):
        self.assertEqual(password_errors('Secret#123'), [])

    def test_every_broken_rule_reported(self):
        self.assertEqual(password_errors('abc'), [
            "Password must be at least 8 characters long",
            "Password must contain at least one uppercase letter",
            "Password must contain at least one number",
            'Password must contain at least one special character (!@#$%^&*(),.?":{}|<>)',
        ])

    def test_missing(self):
        self.assertEqual(password_errors(''), ["Password is required"])


class AuthFormsTest(SimpleTestCase):
    def test_login_form(self):
        form = LoginForm({'email': ' jane@example.com ', 'password': 'x'})
        self.assertTrue(form.is_valid())
        self.assertEqual(form.cleaned_data['email'], 'jane@example.com')

        form = LoginForm({'email': 'not-an-email', 'password': '  '})
        self.assertFalse(form.is_valid())
        self.assertEqual(form.error_list(), ["Please enter a valid email address", "Password is required"])

    def test_register_form_names(self):
        self.assertTrue(RegisterForm(register_data()).is_valid())

        form = RegisterForm(register_data(forename='', surname='x' * 51))
        self.assertFalse(form.is_valid())
        self.assertIn("First name is required", form.error_list())
        self.assertIn("Last name must not exceed 50 characters", form.error_list())

    def test_register_form_password_rules(self):
        form = RegisterForm(register_data(password='password1!'))
        self.assertFalse(form.is_valid())
        self.assertEqual(form.errors['password'], ["Password must contain at least one uppercase letter"])


class AuthServiceTest(SimpleTestCase):
    def service(self, session):
        return AuthService(BackendClient(base_url=BASE, timeout=5, session=session))

    def test_login(self):
        session = mock.Mock()
        session.request.return_value = make_response(200, {'success': True, 'user': BACKEND_USER})
        user = self.service(session).login('jane@example.com', 'Secret#123')

        self.assertEqual(user, {
            'user_id': 2, 'email': 'jane@example.com', 'forename': 'Jane', 'surname': 'Doe', 'role': 'User',
        })
        session.request.assert_called_once_with(
            'POST', f'{BASE}/api/auth/login',
            json={'email': 'jane@example.com', 'password': 'Secret#123'}, timeout=5)

    def test_login_rejected(self):
        session = mock.Mock()
        session.request.return_value = make_response(401, {'message': 'Invalid credentials'})
        with self.assertRaises(AuthError) as ctx:
            self.service(session).login('jane@example.com', 'wrong')
        self.assertEqual(ctx.exception.message, 'Invalid credentials')
        self.assertEqual(ctx.exception.status_code, 401)

    def test_register_validation_details(self):
        session = mock.Mock()
        session.request.return_value = make_response(
            400, {'message': 'Validation failed', 'details': ['Email already registered']})
        with self.assertRaises(AuthError) as ctx:
            self.service(session).register('jane@example.com', 'Secret#123', 'Jane', 'Doe')
        self.assertEqual(ctx.exception.messages, ['Email already registered'])

    def test_non_json_success_body(self):
        session = mock.Mock()
        session.request.return_value = make_response(200, content=b'<html>gateway</html>')
        with self.assertRaises(AuthError) as ctx:
            self.service(session).login('jane@example.com', 'Secret#123')
        self.assertEqual(ctx.exception.message, 'Login failed. Please try again.')
        self.assertIsNone(ctx.exception.status_code)

        with self.assertRaises(AuthError) as ctx:
            self.service(session).register('jane@example.com', 'Secret#123', 'Jane', 'Doe')
        self.assertEqual(ctx.exception.message, 'Registration failed')

    def test_backend_down(self):
        session = mock.Mock()
        session.request.side_effect = requests.ConnectionError('refused')
        with self.assertRaises(AuthError) as ctx:
            self.service(session).login('jane@example.com', 'Secret#123')
        self.assertEqual(ctx.exception.message, 'Network Error')
        self.assertIsNone(ctx.exception.status_code)
        self.assertIn(BASE, ctx.exception.details[0])


@mock.patch('accounts.views.get_auth_service')
class LoginViewTest(SimpleTestCase):
    def test_form(self, get_service):
        resp = self.client.get('/login?error=auth_required')
        self.assertContains(resp, 'Please log in to access this page.')

    def test_success(self, get_service):
        get_service.return_value.login.return_value = dict(APPLICANT_USER)
        resp = self.client.post('/login', {'email': 'jane@example.com', 'password': 'Secret#123'}, follow=True)
        self.assertRedirects(resp, '/')
        self.assertContains(resp, 'Logged in successfully as: Jane Doe')
        self.assertEqual(self.client.session['user']['email'], 'jane@example.com')
        self.assertTrue(self.client.session['is_authenticated'])

    def test_returns_to_protected_page(self, get_service):
        get_service.return_value.login.return_value = dict(APPLICANT_USER)
        resp = self.client.get('/my-applications')
        self.assertRedirects(resp, '/login?error=auth_required', fetch_redirect_response=False)

        resp = self.client.post('/login', {'email': 'jane@example.com', 'password': 'Secret#123'})
        self.assertRedirects(resp, '/my-applications', fetch_redirect_response=False)
        self.assertNotIn('redirect_url', self.client.session)

    def test_invalid_form(self, get_service):
        resp = self.client.post('/login', {'email': '', 'password': ''})
        self.assertContains(resp, 'Email is required', status_code=400)
        get_service.return_value.login.assert_not_called()

    def test_rejected_credentials(self, get_service):
        get_service.return_value.login.side_effect = AuthError('Invalid credentials', status_code=401)
        resp = self.client.post('/login', {'email': 'jane@example.com', 'password': 'wrong'})
        self.assertContains(resp, 'Invalid credentials', status_code=401)

    def test_backend_down(self, get_service):
        get_service.return_value.login.side_effect = AuthError('Network Error', ['refused'])
        resp = self.client.post('/login', {'email': 'jane@example.com', 'password': 'Secret#123'})
        self.assertContains(resp, 'An error occurred. Please try again later.', status_code=500)

    def test_already_logged_in(self, get_service):
        login_as(self.client, APPLICANT_USER)
        resp = self.client.get('/login')
        self.assertRedirects(resp, '/', fetch_redirect_response=False)


    def test_garbled_backend_reply_shows_error_page(self, get_service):
        get_service.return_value.login.side_effect = AuthError('Login failed. Please try again.')
        resp = self.client.post('/login', {'email': 'jane@example.com', 'password': 'Secret#123'})
        self.assertContains(resp, 'An error occurred. Please try again later.', status_code=500)


@mock.patch('accounts.views.get_auth_service')
class RegisterViewTest(SimpleTestCase):
    def test_success(self, get_service):
        get_service.return_value.register.return_value = dict(APPLICANT_USER)
        resp = self.client.post('/register', register_data(), follow=True)
        self.assertContains(resp, 'Registered and logged in successfully as: Jane Doe')
        get_service.return_value.register.assert_called_once_with('jane@example.com', 'Secret#123', 'Jane', 'Doe')

    def test_invalid_password(self, get_service):
        resp = self.client.post('/register', register_data(password='short'))
        self.assertContains(resp, 'Password must be at least 8 characters long', status_code=400)

    def test_backend_validation(self, get_service):
        get_service.return_value.register.side_effect = AuthError(
            'Validation failed', ['Email already registered'], status_code=409)
        resp = self.client.post('/register', register_data())
        self.assertContains(resp, 'Email already registered', status_code=400)


@mock.patch('accounts.views.get_auth_service')
class LogoutViewTest(SimpleTestCase):
    def test_clears_session(self, get_service):
        login_as(self.client, ADMIN_USER)
        resp = self.client.post('/logout')
        self.assertRedirects(resp, '/login', fetch_redirect_response=False)
        self.assertNotIn('user', self.client.session)

    def test_backend_failure_still_logs_out(self, get_service):
        get_service.return_value.logout.side_effect = AuthError('Logout failed. Please try again.')
        login_as(self.client, ADMIN_USER)
        resp = self.client.get('/logout')
        self.assertEqual(resp.status_code, 302)
        self.assertNotIn('is_authenticated', self.client.session)


class DecoratorsTest(SimpleTestCase):
    def setUp(self):
        self.factory = RequestFactory()

    def request(self, user=None, **headers):
        request = self.factory.get('/admin/job-roles/new?x=1', **headers)
        request.session = {}
        if user:
            request.session.update({'is_authenticated': True, 'user': user})
        return request

    def test_login_required_remembers_target(self):
        view = login_required(lambda request: 'ok')
        request = self.request()
        resp = view(request)
        self.assertEqual(resp.status_code, 302)
        self.assertEqual(resp['Location'], '/login?error=auth_required')
        self.assertEqual(request.session['redirect_url'], '/admin/job-roles/new?x=1')
        self.assertEqual(view(self.request(APPLICANT_USER)), 'ok')

    def test_admin_required_json(self):
        view = admin_required(lambda request: 'ok')
        resp = view(self.request(HTTP_ACCEPT='application/json'))
        self.assertEqual(resp.status_code, 401)

        resp = view(self.request(APPLICANT_USER, HTTP_X_REQUESTED_WITH='XMLHttpRequest'))
        self.assertEqual(resp.status_code, 403)
        self.assertIn(b'Admin access required for this resource', resp.content)

    def test_admin_role_is_case_insensitive(self):
        view = admin_required(lambda request: 'ok')
        self.assertEqual(view(self.request(dict(ADMIN_USER, role='admin'))), 'ok')


class ProfileColorTest(SimpleTestCase):
    def test_stable(self):
        self.assertEqual(profile_color('jane@example.com'), profile_color('jane@example.com'))
        self.assertIn(profile_color('jane@example.com'), PROFILE_COLORS)

    def test_known_values(self):
        self.assertEqual(profile_color(''), PROFILE_COLORS[0])
        self.assertEqual(profile_color('a'), PROFILE_COLORS[1])

    def test_nav_shows_user(self):
        client = Client()
        login_as(client, ADMIN_USER)
        resp = client.get('/')
        self.assertContains(resp, profile_color('admin@example.com'))
