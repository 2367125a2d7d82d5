from flask_login import UserMixin

from config import ADMIN_ROLE


class Session:
    """Normalized proof of authentication handed out by the auth gateway.

    Every field is required; defaults are applied before construction.
    """
    FIELDS = ('id', 'email', 'name', 'role', 'access_token')

    def __init__(self, id, email, name, role, access_token):
        self.id = id
        self.email = email
        self.name = name
        self.role = role
        self.access_token = access_token

    def to_dict(self):
        return {field: getattr(self, field) for field in self.FIELDS}

    @classmethod
    def from_dict(cls, data):
        if not data or not data.get('id') or not data.get('access_token'):
            return None
        return cls(*(data.get(field) for field in cls.FIELDS))

    def __eq__(self, other):
        return isinstance(other, Session) and self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"<Session id={self.id!r} email={self.email!r} role={self.role!r}>"


class User(UserMixin):
    """Logged-in user for flask-login, backed by a Session."""
    def __init__(self, session):
        self.id = session.id
        self.email = session.email
        self.name = session.name
        self.role = session.role
        self.access_token = session.access_token

    @property
    def is_admin(self):
        return self.role == ADMIN_ROLE

    def __repr__(self):
        return f"<User id={self.id} name={self.name!r}>"
