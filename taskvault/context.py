from dataclasses import dataclass
from typing import Any, Optional

from fastapi import Request

from taskvault.config import get_config
from taskvault.errors import AuthenticationRequired


@dataclass(frozen=True)
class UserContext:
    """Identity of the caller, passed explicitly into every service call."""

    user_id: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.user_id)

    def require_user(self) -> str:
        if not self.user_id:
            raise AuthenticationRequired()
        return self.user_id


def _claims_subject(event: dict[str, Any]) -> Optional[str]:
    # REST API (Cognito authorizer) or HTTP API (JWT authorizer)
    authorizer = (event.get("requestContext") or {}).get("authorizer") or {}
    claims = authorizer.get("claims") or (authorizer.get("jwt") or {}).get("claims") or {}
    sub = claims.get("sub")
    return str(sub) if sub else None


async def get_user_context(request: Request) -> UserContext:
    """
    Build the caller's context. Under Mangum only the API Gateway authorizer
    claims count; outside Lambda a header set by a trusted upstream proxy is used.
    """
    event = request.scope.get("aws.event")
    if event is not None:
        # Lambda callers can send any header, so no claims means anonymous
        sub = _claims_subject(event) if isinstance(event, dict) else None
        return UserContext(user_id=sub)

    header_value = request.headers.get(get_config().user_header)
    if header_value and header_value.strip():
        return UserContext(user_id=header_value.strip())
    return UserContext()
