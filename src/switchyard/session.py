"""Session context — authentication state and validation flash storage.

The dispatcher never touches process-global session state. It talks to
a ``SessionContext`` passed to ``Dispatcher(session=...)`` or to an
individual ``dispatch(..., session=...)`` call.

``MemorySession`` is a dict-backed implementation. ``SignedCookieSession``
round-trips the same dict through a signed cookie value using
``itsdangerous``::

    session = SignedCookieSession.load(cookie, secret_key="s3cr3t")
    response = dispatcher.dispatch("POST", "/products", form, session=session)
    set_cookie("switchyard_session", session.dump())
    if session.redirect_location:
        ...
"""

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from itsdangerous import BadSignature, URLSafeTimedSerializer

from switchyard.errors import ConfigurationError

VALIDATION_ERRORS_KEY = "validation_errors"
FORM_DATA_KEY = "form_data"


@runtime_checkable
class SessionContext(Protocol):
    """What the dispatcher needs from a session."""

    def is_authenticated(self) -> bool: ...

    def store_validation_errors(self, errors: Mapping[str, str]) -> None: ...

    def store_form_data(self, data: Mapping[str, Any]) -> None: ...

    def redirect(self, location: str) -> None: ...


class MemorySession:
    """Dict-backed session.

    Authenticated when ``user_key`` (default ``"user_id"``) is present.
    Validation errors and the submitted form are stored under
    ``"validation_errors"`` and ``"form_data"`` for the next request to
    pick up with ``pop_validation_errors()`` / ``pop_form_data()``.
    """

    __slots__ = ("data", "redirect_location", "user_key")

    def __init__(self, data: Mapping[str, Any] | None = None, *, user_key: str = "user_id") -> None:
        self.data: dict[str, Any] = dict(data or {})
        self.user_key = user_key
        self.redirect_location: str | None = None

    def is_authenticated(self) -> bool:
        return self.data.get(self.user_key) is not None

    def login(self, user_id: Any) -> None:
        self.data[self.user_key] = user_id

    def logout(self) -> None:
        self.data.pop(self.user_key, None)

    def store_validation_errors(self, errors: Mapping[str, str]) -> None:
        self.data[VALIDATION_ERRORS_KEY] = dict(errors)

    def store_form_data(self, data: Mapping[str, Any]) -> None:
        self.data[FORM_DATA_KEY] = dict(data)

    def redirect(self, location: str) -> None:
        self.redirect_location = location

    def pop_validation_errors(self) -> dict[str, str]:
        return self.data.pop(VALIDATION_ERRORS_KEY, None) or {}

    def pop_form_data(self) -> dict[str, Any]:
        return self.data.pop(FORM_DATA_KEY, None) or {}


class SignedCookieSession(MemorySession):
    """A ``MemorySession`` serialized into a signed cookie value.

    Signed, not encrypted: the client can read but not forge the data.
    ``load`` returns an empty session for a missing, tampered, or expired
    cookie.
    """

    __slots__ = ("_serializer",)

    def __init__(
        self,
        data: Mapping[str, Any] | None = None,
        *,
        secret_key: str,
        salt: str = "switchyard.session",
        user_key: str = "user_id",
    ) -> None:
        if not secret_key:
            msg = "SignedCookieSession secret_key must not be empty."
            raise ConfigurationError(msg)
        super().__init__(data, user_key=user_key)
        self._serializer = URLSafeTimedSerializer(secret_key, salt=salt)

    @classmethod
    def load(
        cls,
        cookie_value: str | None,
        *,
        secret_key: str,
        max_age: int | None = 86400,
        salt: str = "switchyard.session",
        user_key: str = "user_id",
    ) -> "SignedCookieSession":
        """Deserialize and verify a cookie value."""
        session = cls(secret_key=secret_key, salt=salt, user_key=user_key)
        if not cookie_value:
            return session
        try:
            data = session._serializer.loads(cookie_value, max_age=max_age)
        except BadSignature:
            return session
        if isinstance(data, dict):
            session.data = data
        return session

    def dump(self) -> str:
        """Serialize and sign the session data for a ``Set-Cookie`` value."""
        return self._serializer.dumps(self.data)
