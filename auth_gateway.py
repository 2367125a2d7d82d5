"""Login and registration flows against the Supabase identity provider.

The gateway turns form submissions into at most two external calls and
normalizes whatever comes back into a ``Session``. It never stores the
session; the caller decides where it lives.
"""
import logging
import threading
from contextlib import contextmanager

import requests

import config
from user import Session

logger = logging.getLogger(__name__)


class AuthResult:
    """Outcome of a sign-in or registration attempt."""
    def __init__(self, session=None, error=None, registered=False):
        self.session = session
        self.error = error
        # Account created but no session established
        self.registered = registered

    @property
    def ok(self):
        return self.session is not None

    def __repr__(self):
        return f"<AuthResult ok={self.ok} error={self.error!r}>"


class FormGuard:
    """Busy flags for forms with a request in flight."""
    def __init__(self):
        self._lock = threading.Lock()
        self._busy = set()

    def acquire(self, key):
        with self._lock:
            if key in self._busy:
                return False
            self._busy.add(key)
            return True

    def release(self, key):
        with self._lock:
            self._busy.discard(key)

    def is_busy(self, key):
        with self._lock:
            return key in self._busy

    @contextmanager
    def hold(self, key):
        acquired = self.acquire(key)
        try:
            yield acquired
        finally:
            if acquired:
                self.release(key)


def _text(value):
    """Stripped string, or None when blank."""
    if value is None:
        return None
    return str(value).strip() or None


def session_from_response(data, fallback_name=config.DEFAULT_DISPLAY_NAME, default_role=config.DEFAULT_ROLE):
    """Build a Session from a sign-in payload, or None if it lacks a token or user id."""
    session = (data or {}).get('session') or {}
    user = (data or {}).get('user') or {}
    access_token = session.get('access_token')
    if not access_token or not user.get('id'):
        return None

    metadata = user.get('user_metadata') or {}
    return Session(
        id=user['id'],
        email=user.get('email') or '',
        name=_text(metadata.get('name')) or _text(fallback_name) or config.DEFAULT_DISPLAY_NAME,
        role=_text(metadata.get('role')) or default_role,
        access_token=access_token
    )


class AuthGateway:
    def __init__(self, api, guard=None, settings=None):
        self.api = api
        self.guard = guard or FormGuard()
        settings = settings or {}

        def setting(name):
            return settings.get(name, getattr(config, name))

        self.default_name = setting('DEFAULT_DISPLAY_NAME')
        self.default_role = setting('DEFAULT_ROLE')
        self.min_password_length = setting('MIN_PASSWORD_LENGTH')
        self.password_too_short = setting('PASSWORD_TOO_SHORT_MESSAGE')
        self.login_error = setting('LOGIN_ERROR_MESSAGE')
        self.register_error = setting('REGISTER_ERROR_MESSAGE')
        self.login_manually = setting('REGISTERED_LOGIN_MANUALLY_MESSAGE')
        self.in_progress = setting('REQUEST_IN_PROGRESS_MESSAGE')

    @staticmethod
    def _form_key(form, email):
        return (form, (email or '').strip().lower())

    def _sign_in(self, email, password, fallback_name):
        data = self.api.sign_in_with_password(email, password)
        if data.get('error'):
            return AuthResult(error=data['error'])

        session = session_from_response(data, fallback_name, self.default_role)
        if session is None:
            logger.warning(f"Sign-in for {email} returned no usable session")
            return AuthResult(error=self.login_error)
        return AuthResult(session=session)

    def sign_in(self, email, password):
        """Password sign-in. Provider errors are returned verbatim."""
        with self.guard.hold(self._form_key('login', email)) as acquired:
            if not acquired:
                return AuthResult(error=self.in_progress)
            try:
                return self._sign_in(email, password, self.default_name)
            except (requests.exceptions.RequestException, ValueError):
                logger.exception(f"Login error for {email}")
                return AuthResult(error=self.login_error)

    def register(self, name, email, password):
        """Create an account through the custodial endpoint, then sign in."""
        if len(password or '') < self.min_password_length:
            return AuthResult(error=self.password_too_short)

        with self.guard.hold(self._form_key('register', email)) as acquired:
            if not acquired:
                return AuthResult(error=self.in_progress)
            try:
                ok, result = self.api.sign_up(name, email, password)
                if not ok:
                    message = result.get('error') if isinstance(result, dict) else None
                    return AuthResult(error=message or self.register_error)

                logger.info(f"Registered {email}, signing in")
                signed_in = self._sign_in(email, password, _text(name) or self.default_name)
                if signed_in.error:
                    return AuthResult(error=self.login_manually, registered=True)
                return signed_in
            except (requests.exceptions.RequestException, ValueError):
                logger.exception(f"Register error for {email}")
                return AuthResult(error=self.register_error)
