import httpx
import pytest

from app.client.api_client import ApiError, Credentials, DevConnectorClient


class FakeServer:
    """Records requests and answers like the profile API would."""

    def __init__(self):
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path == "/api/users/login":
            return httpx.Response(200, json={"access_token": "tok-123", "token_type": "bearer"})
        if path == "/api/profile" and request.method == "GET":
            if "authorization" not in request.headers:
                return httpx.Response(401, json={"detail": "Unauthorized"})
            return httpx.Response(200, json={"handle": "neo"})
        if path == "/api/profile" and request.method == "DELETE":
            return httpx.Response(200, json={"msg": "Profile and account deleted"})
        if path == "/api/profile/all":
            return httpx.Response(200, json=[])
        if path.startswith("/api/profile/experience/"):
            return httpx.Response(404, json={"experience": "Experience not found"})
        return httpx.Response(500, text="boom")


@pytest.fixture()
def server():
    return FakeServer()


@pytest.fixture()
def anonymous(server):
    with DevConnectorClient("http://testserver", transport=httpx.MockTransport(server)) as api:
        yield api


def test_credentials_send_both_header_styles():
    assert Credentials("abc").headers() == {"Authorization": "Bearer abc", "x-auth-token": "abc"}
    assert Credentials().headers() == {}


def test_login_returns_new_client_and_leaves_original_anonymous(server, anonymous):
    with anonymous.login("neo@example.com", "secret123") as api:
        assert api.is_authenticated
        assert not anonymous.is_authenticated
        assert api.get_current_profile() == {"handle": "neo"}

    sent = server.requests[-1]
    assert sent.headers["authorization"] == "Bearer tok-123"
    assert sent.headers["x-auth-token"] == "tok-123"

    with pytest.raises(ApiError) as exc_info:
        anonymous.get_current_profile()
    assert exc_info.value.status_code == 401


def test_public_calls_need_no_credentials(anonymous):
    assert anonymous.get_profiles() == []


def test_error_body_is_carried_on_api_error(anonymous):
    with pytest.raises(ApiError) as exc_info:
        anonymous.delete_experience("missing")
    assert exc_info.value.status_code == 404
    assert exc_info.value.errors == {"experience": "Experience not found"}


def test_non_json_error_body(anonymous):
    with pytest.raises(ApiError) as exc_info:
        anonymous.get_profile_by_handle("neo")
    assert exc_info.value.errors == {"error": "boom"}


def test_delete_account_logs_out(server, anonymous):
    with anonymous.login("neo@example.com", "secret123") as api:
        with api.delete_account() as logged_out:
            assert not logged_out.is_authenticated
    assert server.requests[-1].url.params["delete_account"] == "true"
