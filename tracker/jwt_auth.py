"""
JWT authentication that reads tokens from HttpOnly cookies, plus the helpers
that issue and clear those cookies.
"""

from typing import Optional, Tuple

from django.conf import settings
from django.http import HttpRequest
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.tokens import RefreshToken

ACCESS_COOKIE = 'access_token'
REFRESH_COOKIE = 'refresh_token'


class CookieJWTAuthentication(JWTAuthentication):
    """
    Reads the access token from the ``access_token`` cookie.
    Falls back to the Authorization header (testing tools, scripts).
    """

    def authenticate(self, request: HttpRequest) -> Optional[Tuple]:
        access_token = request.COOKIES.get(ACCESS_COOKIE)

        if not access_token:
            return super().authenticate(request)

        validated_token = self.get_validated_token(access_token)
        return self.get_user(validated_token), validated_token

    def authenticate_header(self, request: HttpRequest) -> str:
        # Makes DRF answer 401 rather than 403 for missing credentials.
        return 'Bearer'


def _cookie_kwargs():
    return {
        'secure': settings.AUTH_COOKIE_SECURE,
        'httponly': True,
        'samesite': 'None' if settings.AUTH_COOKIE_SECURE else 'Lax',
        'path': '/',
    }


def set_access_cookie(response, access_token):
    lifetime = settings.SIMPLE_JWT['ACCESS_TOKEN_LIFETIME']
    response.set_cookie(
        key=ACCESS_COOKIE,
        value=access_token,
        max_age=int(lifetime.total_seconds()),
        **_cookie_kwargs(),
    )


def set_auth_cookies(response, user):
    """Issue a fresh token pair for ``user`` and attach both as cookies."""
    refresh = RefreshToken.for_user(user)
    set_access_cookie(response, str(refresh.access_token))

    lifetime = settings.SIMPLE_JWT['REFRESH_TOKEN_LIFETIME']
    response.set_cookie(
        key=REFRESH_COOKIE,
        value=str(refresh),
        max_age=int(lifetime.total_seconds()),
        **_cookie_kwargs(),
    )
    return response


def clear_auth_cookies(response):
    samesite = _cookie_kwargs()['samesite']
    response.delete_cookie(ACCESS_COOKIE, path='/', samesite=samesite)
    response.delete_cookie(REFRESH_COOKIE, path='/', samesite=samesite)
    return response
