from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional

from jose import JWTError, jwt

from returndesk.config import settings
from returndesk.utils.log import get_logger

log = get_logger("auth")


class AuthError(Exception):
    """Raised when a write is attempted without an active session."""
    pass


@dataclass(frozen=True)
class AuthSession:
    user_id: str
    email: Optional[str] = None
    expires_at: Optional[datetime] = None


class TokenAuthProvider:
    """
    Bearer-token identity provider.

    Tokens are HS256 JWTs carrying the user id in `sub`. The login screens that
    hand tokens out live outside this service; `issue_token` exists for them
    and for seeding scripts.
    """

    def __init__(self, secret: Optional[str] = None, algorithm: Optional[str] = None,
                 expire_minutes: Optional[int] = None):
        self.secret = secret or settings.SECRET_KEY
        self.algorithm = algorithm or settings.JWT_ALGORITHM
        self.expire_minutes = expire_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES

    def issue_token(self, user_id: str, email: Optional[str] = None,
                    expires_delta: Optional[timedelta] = None) -> str:
        expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=self.expire_minutes))
        claims = {"sub": str(user_id), "exp": expire}
        if email:
            claims["email"] = email
        return jwt.encode(claims, self.secret, algorithm=self.algorithm)

    def get_session(self, token: Optional[str]) -> Optional[AuthSession]:
        """Return the session for `token`, or None when it is missing, invalid or expired."""
        if not token:
            return None
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except JWTError as e:
            log.info("rejected token: %s", e)
            return None
        user_id = payload.get("sub")
        if not user_id:
            return None
        exp = payload.get("exp")
        return AuthSession(
            user_id=str(user_id),
            email=payload.get("email"),
            expires_at=datetime.fromtimestamp(exp, tz=timezone.utc) if exp else None,
        )


class SessionContext:
    """
    The current user's session, passed explicitly to the components that need it.

    Lifecycle: initialize() when the app (or request) starts, login()/logout()
    as auth events arrive, teardown() when done. Listeners registered with
    on_change() are called with the new session (or None) on every change.
    """

    def __init__(self, provider: Optional[TokenAuthProvider] = None):
        self.provider = provider or TokenAuthProvider()
        self.session: Optional[AuthSession] = None
        self._listeners: List[Callable[[Optional[AuthSession]], None]] = []

    def initialize(self, token: Optional[str] = None) -> Optional[AuthSession]:
        self.session = self.provider.get_session(token)
        return self.session

    def on_change(self, listener: Callable[[Optional[AuthSession]], None]) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self):
        for listener in list(self._listeners):
            listener(self.session)

    def login(self, token: str) -> Optional[AuthSession]:
        self.session = self.provider.get_session(token)
        self._notify()
        return self.session

    def logout(self) -> None:
        self.session = None
        self._notify()

    def teardown(self) -> None:
        self._listeners.clear()
        self.session = None

    @property
    def is_authenticated(self) -> bool:
        return self.session is not None

    @property
    def user_id(self) -> Optional[str]:
        return self.session.user_id if self.session else None

    def require_user_id(self) -> str:
        if self.session is None:
            raise AuthError("No active session")
        return self.session.user_id
