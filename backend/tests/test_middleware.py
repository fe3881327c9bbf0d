"""
TechNotes Backend — Middleware Tests
======================================

What:  Path matching for BearerAuthMiddleware and claim propagation.
"""

import jwt
import pytest
from fastapi import FastAPI, Request
from httpx import ASGITransport, AsyncClient

from technotes.middleware.auth import BearerAuthMiddleware

from conftest import make_token


class TestProtectedPaths:

    def setup_method(self):
        self.middleware = BearerAuthMiddleware(FastAPI(), protected_paths=["/users", "/notes/"])

    @pytest.mark.parametrize("path", ["/users", "/users/", "/notes", "/notes/abc"])
    def test_protected(self, path):
        assert self.middleware.is_protected(path)

    @pytest.mark.parametrize("path", ["/", "/health", "/docs", "/usersettings", "/notebook"])
    def test_public(self, path):
        assert not self.middleware.is_protected(path)


class TestClaims:

    @pytest.mark.asyncio
    async def test_claims_attached_to_request_state(self):
        app = FastAPI()
        app.add_middleware(
            BearerAuthMiddleware,
            protected_paths=["/whoami"],
            secret="unit-test-secret-0123456789abcdefghij",
        )

        @app.get("/whoami")
        async def whoami(request: Request):
            return {"username": request.state.username, "roles": request.state.roles}

        token = make_token(
            username="bob", roles=["Manager"], secret="unit-test-secret-0123456789abcdefghij"
        )
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/whoami", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 200
        assert response.json() == {"username": "bob", "roles": ["Manager"]}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("user_info", ["alice", ["alice", "Admin"], 42])
    async def test_malformed_user_info_claim_forbidden(self, user_info):
        app = FastAPI()
        app.add_middleware(
            BearerAuthMiddleware,
            protected_paths=["/whoami"],
            secret="unit-test-secret-0123456789abcdefghij",
        )

        @app.get("/whoami")
        async def whoami():
            return {}

        token = jwt.encode(
            {"UserInfo": user_info}, "unit-test-secret-0123456789abcdefghij", algorithm="HS256"
        )
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/whoami", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 403
        assert response.json() == {"message": "Forbidden"}

    @pytest.mark.asyncio
    async def test_options_preflight_passes_through(self):
        app = FastAPI()
        app.add_middleware(BearerAuthMiddleware, protected_paths=["/whoami"])

        @app.options("/whoami")
        async def preflight():
            return {}

        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.options("/whoami")

        assert response.status_code == 200
