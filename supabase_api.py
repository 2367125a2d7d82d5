import os
import logging
import requests

from config import DEFAULT_FUNCTION_NAME

logger = logging.getLogger(__name__)


def _error_message(body, fallback):
    """Pick the human readable message out of a GoTrue error body."""
    if isinstance(body, dict):
        for key in ('msg', 'error_description', 'message', 'error'):
            if body.get(key):
                return str(body[key])
    return fallback


def _json_object(response):
    """Parsed JSON body, which must be an object."""
    body = response.json()
    if not isinstance(body, dict):
        raise ValueError(f"Expected a JSON object, got {type(body).__name__}")
    return body


def _unwrap_list(result, key):
    if isinstance(result, list):
        return result
    if isinstance(result, dict) and 'error' not in result:
        return result.get(key) or []
    return result


class SupabaseAPI:
    """Wrapper class for the Supabase auth endpoints and the task server function."""

    def __init__(self, project_id=None, anon_key=None, function_name=DEFAULT_FUNCTION_NAME, timeout=30):
        self.project_id = project_id or os.environ.get('SUPABASE_PROJECT_ID', '')
        self.anon_key = anon_key or os.environ.get('SUPABASE_ANON_KEY', '')
        self.base_url = f"https://{self.project_id}.supabase.co"
        self.functions_url = f"{self.base_url}/functions/v1/{function_name}"
        self.timeout = timeout

    def _headers(self, bearer=None):
        return {
            'apikey': self.anon_key,
            'Authorization': f'Bearer {bearer or self.anon_key}',
            'Content-Type': 'application/json',
            'Accept': 'application/json'
        }

    def sign_in_with_password(self, email, password):
        """Password sign-in against GoTrue.

        Returns ``{'user': ..., 'session': {'access_token': ...}}`` on success
        and ``{'error': message}`` when the provider rejects the credentials.
        Network errors and malformed bodies (ValueError) are left to the caller.
        """
        response = requests.post(
            f"{self.base_url}/auth/v1/token",
            params={'grant_type': 'password'},
            headers=self._headers(),
            json={'email': email, 'password': password},
            timeout=self.timeout
        )
        body = _json_object(response)
        if not response.ok:
            return {'error': _error_message(body, 'Invalid login credentials')}

        # GoTrue returns the session fields flat, next to the user
        access_token = body.get('access_token')
        return {
            'user': body.get('user'),
            'session': {'access_token': access_token} if access_token else None
        }

    def sign_up(self, name, email, password):
        """Create an account through the custodial signup function. Returns (ok, body)."""
        response = requests.post(
            f"{self.functions_url}/signup",
            headers={
                'Content-Type': 'application/json',
                'Authorization': f'Bearer {self.anon_key}'
            },
            json={'name': name, 'email': email, 'password': password},
            timeout=self.timeout
        )
        return response.ok, _json_object(response)

    def _make_request(self, method, endpoint, access_token, params=None, payload=None):
        """Internal method to call the task server function on behalf of a user."""
        if not self.project_id or not self.anon_key:
            return {'error': 'Supabase project not configured'}

        try:
            response = requests.request(
                method,
                f"{self.functions_url}/{endpoint}",
                headers=self._headers(access_token),
                params=params,
                json=payload,
                timeout=self.timeout
            )
            response.raise_for_status()
            return response.json()
        except requests.exceptions.RequestException as e:
            logger.warning(f"{method} {endpoint} failed: {e}")
            return {'error': str(e)}
        except ValueError as e:
            logger.warning(f"{method} {endpoint} returned invalid JSON: {e}")
            return {'error': 'Invalid response from server'}

    def get_tasks(self, access_token):
        """Tasks visible to the user behind the token."""
        return _unwrap_list(self._make_request('GET', 'tasks', access_token), 'tasks')

    def get_users(self, access_token):
        """All users. The server function only answers admins."""
        return _unwrap_list(self._make_request('GET', 'users', access_token), 'users')

    def create_task(self, access_token, task):
        """Create a task through the server function."""
        return self._make_request('POST', 'tasks', access_token, payload=task)
