from typing import Optional

from fastapi import Depends, Request
from fastapi.security.utils import get_authorization_scheme_param

from returndesk.adapters.auth_provider import AuthError, SessionContext, TokenAuthProvider

auth_provider = TokenAuthProvider()


def _bearer_token(request: Request) -> Optional[str]:
    raw = request.headers.get("Authorization") or request.cookies.get("Authorization")
    scheme, param = get_authorization_scheme_param(raw)
    if scheme.lower() != "bearer" or not param:
        return None
    return param


def get_session_context(request: Request):
    """One SessionContext per request, torn down when the response is done."""
    ctx = SessionContext(auth_provider)
    ctx.initialize(_bearer_token(request))
    try:
        yield ctx
    finally:
        ctx.teardown()


def require_session(ctx: SessionContext = Depends(get_session_context)) -> SessionContext:
    if not ctx.is_authenticated:
        raise AuthError("Not authenticated")
    return ctx
