from datetime import timedelta

import jwt
import pytest
from django.conf import settings
from django.contrib.auth.models import AnonymousUser
from django.utils import timezone
from rest_framework_simplejwt.tokens import AccessToken

from pos_backend.jwt_websocket_middleware import JWTAuthMiddleware


def scope_with(query=b"", cookie=None):
    headers = [(b"cookie", cookie.encode())] if cookie else []
    return {"type": "websocket", "query_string": query, "headers": headers}


class TestTokenExtraction:
    def setup_method(self):
        self.middleware = JWTAuthMiddleware(inner=None)

    def test_query_parameter(self):
        assert self.middleware.extract_token(scope_with(query=b"token=abc")) == "abc"

    def test_cookie(self):
        scope = scope_with(cookie="theme=dark; access_token=from-cookie")
        assert self.middleware.extract_token(scope) == "from-cookie"

    def test_query_wins_over_cookie(self):
        scope = scope_with(query=b"token=q", cookie="access_token=c")
        assert self.middleware.extract_token(scope) == "q"

    def test_no_token(self):
        assert self.middleware.extract_token(scope_with()) is None


@pytest.mark.asyncio
class TestTokenValidation:
    async def test_garbage_token_is_anonymous(self):
        user = await JWTAuthMiddleware(inner=None).get_user_from_jwt(scope_with(query=b"token=garbage"))
        assert isinstance(user, AnonymousUser)

    async def test_expired_token_is_anonymous(self):
        token = jwt.encode(
            {"user_id": 1, "exp": timezone.now() - timedelta(minutes=1)},
            settings.SECRET_KEY,
            algorithm="HS256",
        )
        user = await JWTAuthMiddleware(inner=None).get_user_from_jwt(
            scope_with(query=f"token={token}".encode())
        )
        assert isinstance(user, AnonymousUser)

    @pytest.mark.django_db(transaction=True)
    async def test_valid_token_resolves_user(self, kitchen_user):
        token = str(AccessToken.for_user(kitchen_user))

        user = await JWTAuthMiddleware(inner=None).get_user_from_jwt(
            scope_with(query=f"token={token}".encode())
        )

        assert user.pk == kitchen_user.pk
