"""Tests for the split-service gateway: auth, identity headers, verbatim relay and 503."""

import json
import unittest

import httpx
from fastapi.testclient import TestClient

from dockmaster.core.security import TokenIssuer
from dockmaster.gateway import create_gateway_app
from dockmaster.main import create_app
from tests.fakes import TEST_JWT_SECRET, FakeRuntime, make_settings


class GatewayTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.seen: list[httpx.Request] = []
        self.settings = make_settings(
            AUTH_SERVICE_URL="http://auth.internal:8081",
            CONTAINER_SERVICE_URL="http://containers.internal:8082",
            VOLUME_SERVICE_URL="http://volumes.internal:8084",
        )
        self.client = self.enterContext(
            TestClient(create_gateway_app(self.settings, transport=httpx.MockTransport(self.upstream)))
        )
        token, _ = TokenIssuer(TEST_JWT_SECRET).issue("alice", "user")
        self.headers = {"Authorization": f"Bearer {token}"}

    def upstream(self, request: httpx.Request) -> httpx.Response:
        self.seen.append(request)
        if request.url.host == "volumes.internal":
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(
            201,
            json={"path": request.url.path, "query": request.url.query.decode()},
            headers={"X-Upstream": request.url.host, "Connection": "close"},
        )


class TestGatewayRouting(GatewayTestCase):
    """Requests are forwarded by prefix with the caller's identity attached."""

    def test_health_is_local(self) -> None:
        self.assertEqual(self.client.get("/health").json(), {"status": "healthy", "service": "api-gateway"})
        self.assertEqual(self.seen, [])

    def test_login_is_forwarded_without_token(self) -> None:
        resp = self.client.post("/auth/login", json={"username": "alice", "password": "pw"})
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(self.seen[0].url.host, "auth.internal")
        self.assertEqual(json.loads(self.seen[0].content), {"username": "alice", "password": "pw"})
        self.assertNotIn("x-user", self.seen[0].headers)

    def test_protected_route_requires_token(self) -> None:
        resp = self.client.get("/containers")
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(self.seen, [])

    def test_forwards_path_query_and_identity(self) -> None:
        resp = self.client.post(
            "/containers/abc/stop?force=true",
            headers={**self.headers, "X-User": "spoofed", "X-Trace": "t-1"},
        )
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json(), {"path": "/containers/abc/stop", "query": "force=true"})
        self.assertEqual(resp.headers["x-upstream"], "containers.internal")
        forwarded = self.seen[0]
        self.assertEqual(forwarded.method, "POST")
        self.assertEqual(forwarded.headers["x-user"], "alice")
        self.assertEqual(forwarded.headers["x-role"], "user")
        self.assertEqual(forwarded.headers["x-trace"], "t-1")
        self.assertEqual(forwarded.headers["host"], "containers.internal:8082")

    def test_bare_prefix_is_forwarded(self) -> None:
        self.client.get("/containers", headers=self.headers, params={"all": "true"})
        self.assertEqual(str(self.seen[0].url), "http://containers.internal:8082/containers?all=true")

    def test_unreachable_upstream_is_503(self) -> None:
        resp = self.client.get("/volumes", headers=self.headers)
        self.assertEqual(resp.status_code, 503)
        self.assertEqual(resp.json(), {"message": "Service unavailable"})


class TestGatewaySharedSecret(GatewayTestCase):
    """The gateway validates tokens the auth service issued with the same JWT_SECRET."""

    def test_missing_secret_refuses_to_build(self) -> None:
        with self.assertLogs("dockmaster.gateway", level="ERROR"), self.assertRaises(ValueError):
            create_gateway_app(make_settings(JWT_SECRET=None))

    def test_token_from_auth_service_is_accepted(self) -> None:
        with TestClient(create_app(make_settings(), executor=FakeRuntime())) as service:
            login = service.post("/auth/login", json={"username": "admin", "password": "admin123"})
        token = login.json()["token"]

        resp = self.client.get("/containers", headers={"Authorization": f"Bearer {token}"})
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(self.seen[0].headers["x-user"], "admin")
        self.assertEqual(self.seen[0].headers["x-role"], "admin")
