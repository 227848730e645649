# auth/dependencies.py
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from crm.auth.security import decode_access_token
from crm.core.errors import Forbidden, Unauthenticated
from crm.schemas.user import CurrentUser

# auto_error=False: a missing header must answer 401 with our own body
bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> CurrentUser:
    if credentials is None or not credentials.credentials:
        raise Unauthenticated()

    user = decode_access_token(credentials.credentials, request.app.state.settings)
    request.state.user = user
    return user


def require_role(role: str):
    """Dependency factory: authenticated caller must carry ``role``.

    Not attached to any route yet; available for role-gated endpoints.
    """

    async def _dep(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if user.role != role:
            raise Forbidden("Access denied")
        return user

    return _dep
