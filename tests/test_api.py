"""End-to-end tests of the service app against an in-memory runtime and database."""

import unittest

import httpx
from fastapi.testclient import TestClient

from dockmaster.core.security import hash_password
from dockmaster.main import create_app
from tests.fakes import FakeRuntime, make_settings


def _empty_registry() -> httpx.MockTransport:
    return httpx.MockTransport(lambda request: httpx.Response(200, json={"results": []}))


class ApiTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.runtime = FakeRuntime()
        self.app = create_app(make_settings(), executor=self.runtime, registry_transport=_empty_registry())
        self.client = self.enterContext(TestClient(self.app))

    def login(self, username: str = "admin", password: str = "admin123") -> dict[str, str]:
        resp = self.client.post("/auth/login", json={"username": username, "password": password})
        self.assertEqual(resp.status_code, 200, resp.text)
        return {"Authorization": f"Bearer {resp.json()['token']}"}


class TestHealthAndAuth(ApiTestCase):
    """Fresh instance: default admin can log in; everything else needs a token."""

    def test_health_is_public(self) -> None:
        resp = self.client.get("/health")
        self.assertEqual(resp.json(), {"status": "healthy", "service": "docker-service"})

    def test_fresh_instance_admin_login(self) -> None:
        resp = self.client.post("/auth/login", json={"username": "admin", "password": "admin123"})
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertTrue(body["token"])
        self.assertIsInstance(body["expires_at"], int)
        self.assertEqual(body["user"], {"username": "admin", "role": "admin"})

    def test_wrong_password_and_unknown_user_look_the_same(self) -> None:
        wrong = self.client.post("/auth/login", json={"username": "admin", "password": "nope"})
        unknown = self.client.post("/auth/login", json={"username": "ghost", "password": "nope"})
        self.assertEqual(wrong.status_code, 401)
        self.assertEqual(wrong.json(), unknown.json())
        self.assertEqual(wrong.json(), {"message": "Invalid credentials"})

    def test_missing_header_is_401_with_challenge(self) -> None:
        resp = self.client.get("/containers")
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.headers["www-authenticate"], "Bearer")
        self.assertIn("message", resp.json())
        self.assertEqual(self.runtime.calls, [])

    def test_bad_token_is_401(self) -> None:
        resp = self.client.get("/auth/me", headers={"Authorization": "Bearer not-a-token"})
        self.assertEqual(resp.status_code, 401)

    def test_me_logout_and_change_password(self) -> None:
        headers = self.login()
        self.assertEqual(self.client.get("/auth/me", headers=headers).json(), {"username": "admin", "role": "admin"})
        resp = self.client.post(
            "/auth/change-password",
            headers=headers,
            json={"current_password": "admin123", "new_password": "a-much-better-one"},
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(self.client.post("/auth/login", json={"username": "admin", "password": "admin123"}).status_code, 401)
        self.login(password="a-much-better-one")
        self.assertEqual(self.client.post("/auth/logout", headers=headers).json()["message"], "Logged out successfully")

    def test_short_new_password_is_400(self) -> None:
        resp = self.client.post(
            "/auth/change-password",
            headers=self.login(),
            json={"current_password": "admin123", "new_password": "short"},
        )
        self.assertEqual(resp.status_code, 400)
        self.assertIn("new_password", resp.json()["message"])

    def test_malformed_body_is_400(self) -> None:
        resp = self.client.post("/auth/login", json={"username": "admin"})
        self.assertEqual(resp.status_code, 400)


class TestContainerFlow(ApiTestCase):
    """Run, stop, list and delete through the REST surface."""

    def test_run_then_stop_shows_exited(self) -> None:
        headers = self.login()
        resp = self.client.post("/containers/run", headers=headers, json={"image": "nginx:latest", "ports": {"8888": "80"}})
        self.assertEqual(resp.status_code, 200, resp.text)
        container_id = resp.json()["container_id"]
        self.assertIn("-p", self.runtime.calls[-1])
        self.assertIn("8888:80", self.runtime.calls[-1])

        running = self.client.get("/containers", headers=headers).json()
        self.assertEqual(running[0]["Id"], container_id)
        self.assertEqual(running[0]["Ports"][0]["PublicPort"], 8888)

        self.assertEqual(self.client.post(f"/containers/{container_id}/stop", headers=headers).status_code, 200)
        self.assertEqual(self.client.get("/containers", headers=headers).json(), [])
        listed = self.client.get("/containers", headers=headers, params={"all": "true"}).json()
        self.assertEqual(listed[0]["State"], "exited")

        self.assertEqual(self.client.delete(f"/containers/{container_id}", headers=headers).status_code, 200)
        self.assertEqual(self.client.get("/containers?all=true", headers=headers).json(), [])

    def test_post_to_collection_runs_container(self) -> None:
        headers = self.login()
        resp = self.client.post("/containers", headers=headers, json={"image": "nginx:latest", "name": "web"})
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(self.runtime.calls[-1][:4], ["run", "-d", "--name", "web"])
        listed = self.client.get("/containers", headers=headers).json()
        self.assertEqual(listed[0]["Id"], resp.json()["container_id"])

    def test_unknown_container_is_404(self) -> None:
        resp = self.client.post("/containers/ghost/start", headers=self.login())
        self.assertEqual(resp.status_code, 404)
        self.assertIn("No such container", resp.json()["message"])

    def test_cli_failure_is_500_with_stderr(self) -> None:
        headers = self.login()
        container_id = self.client.post("/containers/run", headers=headers, json={"image": "nginx"}).json()["container_id"]
        resp = self.client.delete(f"/containers/{container_id}", headers=headers)
        self.assertEqual(resp.status_code, 500)
        self.assertIn("container is running", resp.json()["message"])

    def test_invalid_tail_is_400(self) -> None:
        resp = self.client.get("/containers/abc/logs", headers=self.login(), params={"tail": "lots"})
        self.assertEqual(resp.status_code, 400)

    def test_run_without_image_never_spawns(self) -> None:
        resp = self.client.post("/containers/run", headers=self.login(), json={"ports": {"80": "80"}})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(self.runtime.calls, [])


class TestImageAndVolumeFlow(ApiTestCase):
    def test_pull_then_list(self) -> None:
        headers = self.login()
        resp = self.client.post("/images/pull", headers=headers, json={"image": "nginx", "tag": "latest"})
        self.assertEqual(resp.status_code, 200, resp.text)
        images = self.client.get("/images", headers=headers).json()
        self.assertIn("nginx:latest", images[0]["RepoTags"])

    def test_search_route_is_not_an_image_id(self) -> None:
        headers = self.login()
        self.client.post("/images/pull", headers=headers, json={"image": "redis"})
        resp = self.client.get("/images/search", headers=headers, params={"q": "red"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["local"][0]["RepoTags"], ["redis:latest"])
        self.assertEqual(resp.json()["docker_hub"], [])

    def test_volume_in_use_conflict_then_force(self) -> None:
        headers = self.login()
        self.assertEqual(self.client.post("/volumes", headers=headers, json={"name": "data"}).json()["name"], "data")
        self.client.post("/containers/run", headers=headers, json={"image": "busybox", "volumes": ["data:/data"]})

        resp = self.client.delete("/volumes/data", headers=headers)
        self.assertEqual(resp.status_code, 409)
        self.assertIn("data", [v["Name"] for v in self.client.get("/volumes", headers=headers).json()])

        self.assertEqual(self.client.delete("/volumes/data", headers=headers, params={"force": "true"}).status_code, 200)
        self.assertEqual(self.client.get("/volumes", headers=headers).json(), [])


class TestLogsEndpoint(ApiTestCase):
    """Only admins may read the audit log."""

    def test_admin_sees_audit_entries(self) -> None:
        headers = self.login()
        entries = self.client.get("/logs", headers=headers).json()
        messages = [e["message"] for e in entries]
        self.assertIn("Default admin user created", messages)
        self.assertIn("User logged in", messages)

    def test_non_admin_is_forbidden(self) -> None:
        self.app.state.auth.store.create_if_absent(
            "viewer", hash_password("viewer-pass", rounds=4), "user"
        )
        resp = self.client.get("/logs", headers=self.login("viewer", "viewer-pass"))
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(resp.json(), {"message": "Admin access required"})
