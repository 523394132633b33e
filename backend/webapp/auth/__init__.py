from webapp.auth.backend import SessionCookieBackend
from webapp.auth.models import AuthenticatedUser
from webapp.auth.policy import csrf_protected, protected_api, public_route, validate_route_auth_policy

__all__ = [
    "AuthenticatedUser",
    "SessionCookieBackend",
    "csrf_protected",
    "protected_api",
    "public_route",
    "validate_route_auth_policy",
]
