"""
TechNotes Backend — Bearer Token Authentication Middleware
============================================================

What:  Verifies `Authorization: Bearer <token>` on protected path prefixes.
Why:   One request-pipeline stage guards every /users and /notes route, so
       no route handler repeats the check.
How:   Decodes the token with PyJWT using the shared ACCESS_TOKEN_SECRET.
       On success the verified claims are attached to `request.state`;
       otherwise the request is answered here and never reaches a handler.

Token format (issued by the login service, not by this backend):
    {
        "UserInfo": {"username": "alice", "roles": ["Employee"]},
        "exp": 1700000000
    }

Responses:
    401 {"message": "Unauthorized"}  Missing or non-Bearer Authorization header
    403 {"message": "Forbidden"}     Signature invalid, token expired or malformed,
                                     or UserInfo claim not an object

Usage:
    app.add_middleware(
        BearerAuthMiddleware,
        protected_paths=["/users", "/notes"],
    )
"""

import logging
from typing import Iterable, Optional

import jwt
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from technotes.config import settings
from technotes.middleware.request_id import request_id_var

logger = logging.getLogger(__name__)


class BearerAuthMiddleware(BaseHTTPMiddleware):
    """
    Rejects unauthenticated requests to protected paths.

    A path is protected when it equals a protected prefix or starts with
    "<prefix>/". Everything else (/, /health, /docs) passes through.
    CORS preflight (OPTIONS) requests are never authenticated.
    """

    def __init__(
        self,
        app,
        protected_paths: Optional[Iterable[str]] = None,
        secret: Optional[str] = None,
        algorithm: Optional[str] = None,
    ):
        super().__init__(app)
        self.protected_paths = tuple(p.rstrip("/") for p in (protected_paths or ()))
        # Resolved per request when not given, so tests can patch settings
        self._secret = secret
        self._algorithm = algorithm

    def is_protected(self, path: str) -> bool:
        path = path.rstrip("/") or "/"
        return any(
            path == prefix or path.startswith(prefix + "/")
            for prefix in self.protected_paths
        )

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.method == "OPTIONS" or not self.is_protected(request.url.path):
            return await call_next(request)

        rid = request_id_var.get("")
        auth_header = request.headers.get("Authorization") or ""
        scheme, _, token = auth_header.partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            logger.info("[%s] Missing bearer token for %s %s", rid, request.method, request.url.path)
            return JSONResponse(status_code=401, content={"message": "Unauthorized"})

        try:
            claims = jwt.decode(
                token.strip(),
                self._secret or settings.access_token_secret,
                algorithms=[self._algorithm or settings.jwt_algorithm],
            )
        except jwt.PyJWTError as e:
            logger.warning("[%s] Rejected bearer token: %s", rid, type(e).__name__)
            return JSONResponse(status_code=403, content={"message": "Forbidden"})

        user_info = claims.get("UserInfo") or {}
        if not isinstance(user_info, dict):
            logger.warning("[%s] Bearer token has malformed UserInfo claim", rid)
            return JSONResponse(status_code=403, content={"message": "Forbidden"})

        request.state.username = user_info.get("username")
        request.state.roles = user_info.get("roles") or []

        return await call_next(request)
