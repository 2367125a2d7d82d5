import os
from datetime import timedelta
from dotenv import load_dotenv

load_dotenv()

# Placeholders used when the identity provider or the store omit a field
DEFAULT_DISPLAY_NAME = 'Usuario'
DEFAULT_ROLE = 'user'
ADMIN_ROLE = 'admin'
UNNAMED_USER_LABEL = 'Sin nombre'

MIN_PASSWORD_LENGTH = 8

# User-facing messages
PASSWORD_TOO_SHORT_MESSAGE = f'La contraseña debe tener al menos {MIN_PASSWORD_LENGTH} caracteres'
LOGIN_ERROR_MESSAGE = 'Error al iniciar sesión'
REGISTER_ERROR_MESSAGE = 'Error al registrarse'
REGISTERED_LOGIN_MANUALLY_MESSAGE = 'Usuario registrado. Por favor inicia sesión manualmente.'
REQUEST_IN_PROGRESS_MESSAGE = 'Ya hay una solicitud en curso. Espera un momento.'

DEFAULT_FUNCTION_NAME = 'make-server-154d65af'


class Config:
    """Flask configuration, loaded with app.config.from_object(Config)."""
    SECRET_KEY = os.getenv('SECRET_KEY')
    PERMANENT_SESSION_LIFETIME = timedelta(hours=int(os.getenv('SESSION_LIFETIME_HOURS') or 24))

    SUPABASE_PROJECT_ID = os.getenv('SUPABASE_PROJECT_ID', '')
    SUPABASE_ANON_KEY = os.getenv('SUPABASE_ANON_KEY', '')
    SUPABASE_FUNCTION = os.getenv('SUPABASE_FUNCTION') or DEFAULT_FUNCTION_NAME
    SUPABASE_TIMEOUT = int(os.getenv('SUPABASE_TIMEOUT') or 30)

    DEFAULT_DISPLAY_NAME = DEFAULT_DISPLAY_NAME
    DEFAULT_ROLE = DEFAULT_ROLE
    UNNAMED_USER_LABEL = UNNAMED_USER_LABEL
    MIN_PASSWORD_LENGTH = MIN_PASSWORD_LENGTH

    PASSWORD_TOO_SHORT_MESSAGE = PASSWORD_TOO_SHORT_MESSAGE
    LOGIN_ERROR_MESSAGE = LOGIN_ERROR_MESSAGE
    REGISTER_ERROR_MESSAGE = REGISTER_ERROR_MESSAGE
    REGISTERED_LOGIN_MANUALLY_MESSAGE = REGISTERED_LOGIN_MANUALLY_MESSAGE
    REQUEST_IN_PROGRESS_MESSAGE = REQUEST_IN_PROGRESS_MESSAGE
