from __future__ import annotations

from typing import Annotated, Optional

from fastapi import Depends, Request, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..core.models import User
from ..core.service import SocialService
from .errors import AuthError

bearer_scheme = HTTPBearer(auto_error=False)


def get_service(request: Request) -> SocialService:
    return request.app.state.service


Service = Annotated[SocialService, Depends(get_service)]


def get_current_user(
    service: Service,
    credentials: Optional[HTTPAuthorizationCredentials] = Security(bearer_scheme),
) -> User:
    if credentials is None or not credentials.credentials:
        raise AuthError("Authentication token is required")
    result = service.resolve_token(credentials.credentials)
    if not result.ok:
        raise AuthError(result.message)
    return result.value


CurrentUser = Annotated[User, Depends(get_current_user)]
