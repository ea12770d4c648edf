"""
JWT WebSocket Authentication Middleware for Django Channels.

Authenticates staff WebSocket connections with the same access tokens the REST
API issues. Browsers cannot set an Authorization header on a WebSocket
handshake, so the token is read from the `token` query parameter first and
from the `access_token` cookie second.
"""
import logging
from urllib.parse import parse_qs

import jwt
from channels.db import database_sync_to_async
from channels.middleware import BaseMiddleware
from django.conf import settings
from django.contrib.auth.models import AnonymousUser

logger = logging.getLogger(__name__)


class JWTAuthMiddleware(BaseMiddleware):
    """
    Adds the authenticated user (or AnonymousUser) to `scope['user']`.
    """

    async def __call__(self, scope, receive, send):
        # Only process WebSocket connections
        if scope["type"] != "websocket":
            return await super().__call__(scope, receive, send)

        # Tests and upstream middleware may already have placed a user.
        if not getattr(scope.get("user"), "is_authenticated", False):
            scope["user"] = await self.get_user_from_jwt(scope)

        return await super().__call__(scope, receive, send)

    def extract_token(self, scope):
        query = parse_qs(scope.get("query_string", b"").decode())
        if query.get("token"):
            return query["token"][0]

        headers = dict(scope.get("headers", []))
        cookie_header = headers.get(b"cookie", b"").decode("utf-8")
        cookies = {}
        for cookie in cookie_header.split("; "):
            if "=" in cookie:
                key, value = cookie.split("=", 1)
                cookies[key] = value
        return cookies.get(settings.SIMPLE_JWT.get("AUTH_COOKIE", "access_token"))

    async def get_user_from_jwt(self, scope):
        access_token = self.extract_token(scope)

        if not access_token:
            logger.debug("No JWT access token found in WebSocket handshake")
            return AnonymousUser()

        jwt_config = settings.SIMPLE_JWT
        try:
            payload = jwt.decode(
                access_token,
                jwt_config.get("SIGNING_KEY", settings.SECRET_KEY),
                algorithms=[jwt_config.get("ALGORITHM", "HS256")],
                options={"verify_signature": True, "verify_exp": True},
            )
        except jwt.ExpiredSignatureError:
            logger.warning("Expired JWT token in WebSocket connection")
            return AnonymousUser()
        except jwt.InvalidTokenError as e:
            logger.warning(f"Invalid JWT token in WebSocket connection: {e}")
            return AnonymousUser()

        user_id = payload.get("user_id")
        if not user_id:
            logger.warning("JWT payload missing user_id")
            return AnonymousUser()

        return await self.get_user(user_id)

    @database_sync_to_async
    def get_user(self, user_id):
        from users.models import User

        try:
            user = User.objects.get(id=user_id, is_active=True)
        except User.DoesNotExist:
            logger.warning(f"User {user_id} from JWT not found")
            return AnonymousUser()

        logger.info(f"WebSocket authenticated: user={user.email}, role={user.role}")
        return user
