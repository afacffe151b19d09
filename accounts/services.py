# accounts/services.py
import logging

import requests

from jobs.services import BackendClient, BackendUnavailable, _response_message

logger = logging.getLogger(__name__)


class AuthError(Exception):
    """The auth backend refused the request."""

    def __init__(self, message, details=None, status_code=None):
        super().__init__(message)
        self.message = message
        self.details = list(details or [])
        self.status_code = status_code

    @property
    def messages(self):
        return self.details or [self.message]


def session_user(backend_user):
    """Map the backend user payload to what we keep in the session."""
    backend_user = backend_user or {}
    return {
        'user_id': backend_user.get('userId') or backend_user.get('id'),
        'email': backend_user.get('email', ''),
        'forename': backend_user.get('forename', ''),
        'surname': backend_user.get('surname', ''),
        'role': backend_user.get('role') or backend_user.get('user_type') or '',
    }


def _json_body(response, default_message):
    try:
        body = response.json()
    except ValueError as exc:
        logger.error("Auth backend returned a non-JSON body (status %s)", response.status_code)
        raise AuthError(default_message) from exc
    if not isinstance(body, dict):
        raise AuthError(default_message)
    return body


class AuthService:
    def __init__(self, client=None):
        self.client = client or BackendClient()

    def _post(self, path, payload, default_message):
        try:
            return self.client.request('POST', path, json=payload)
        except BackendUnavailable as exc:
            logger.error("Auth backend unavailable: %s", exc)
            raise AuthError("Network Error", [exc.message]) from exc
        except requests.HTTPError as exc:
            response = exc.response
            details = []
            if response is not None:
                try:
                    body = response.json()
                except ValueError:
                    body = {}
                if isinstance(body, dict):
                    details = body.get('details') or []
            raise AuthError(
                _response_message(response, default_message) if response is not None else default_message,
                details,
                status_code=response.status_code if response is not None else None,
            ) from exc
        except requests.RequestException as exc:
            raise AuthError(default_message) from exc

    def login(self, email, password):
        response = self._post(
            '/api/auth/login', {'email': email, 'password': password},
            "Login failed. Please try again.")
        body = _json_body(response, "Login failed. Please try again.")
        logger.info("User %s logged in", email)
        return session_user(body.get('user'))

    def register(self, email, password, forename, surname):
        response = self._post(
            '/api/auth/register',
            {'email': email, 'password': password, 'forename': forename, 'surname': surname},
            "Registration failed")
        body = _json_body(response, "Registration failed")
        logger.info("Registered user %s", email)
        return session_user(body.get('user'))

    def logout(self):
        self._post('/api/auth/logout', None, "Logout failed. Please try again.")
