# app/client/api_client.py
# DevConnector API 的 Python 客戶端
# 憑證是明確傳入的 Credentials 物件，不使用全域的預設 header
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx


class ApiError(Exception):
    """非 2xx 回應：errors 是伺服器回傳的欄位錯誤 dict"""

    def __init__(self, status_code: int, errors: Dict[str, Any]):
        super().__init__(f"{status_code}: {errors}")
        self.status_code = status_code
        self.errors = errors


@dataclass(frozen=True)
class Credentials:
    token: Optional[str] = None

    def headers(self) -> Dict[str, str]:
        """同時送出兩種 header，新舊版的伺服器都能辨識"""
        if not self.token:
            return {}
        return {
            "Authorization": f"Bearer {self.token}",
            "x-auth-token": self.token,
        }


class DevConnectorClient:
    def __init__(
        self,
        base_url: str,
        credentials: Optional[Credentials] = None,
        transport: Optional[httpx.BaseTransport] = None,
        timeout: float = 10.0,
    ):
        self.base_url = base_url
        self.credentials = credentials or Credentials()
        self._transport = transport
        self._timeout = timeout
        self._http = httpx.Client(
            base_url=base_url,
            headers=self.credentials.headers(),
            transport=transport,
            timeout=timeout,
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def with_credentials(self, credentials: Credentials) -> "DevConnectorClient":
        """
        回傳帶新憑證的 client，原本的 client 不受影響。
        (注意) 回傳的是新的 httpx 連線，呼叫端負責 close() 或使用 with
        """
        return DevConnectorClient(
            self.base_url, credentials, transport=self._transport, timeout=self._timeout
        )

    @property
    def is_authenticated(self) -> bool:
        return bool(self.credentials.token)

    def _request(self, method: str, path: str, **kwargs) -> Any:
        response = self._http.request(method, path, **kwargs)
        if response.is_error:
            try:
                errors = response.json()
            except ValueError:
                errors = {"error": response.text or response.reason_phrase}
            raise ApiError(response.status_code, errors)
        return response.json()

    # --- 帳號 ---
    def login(self, email: str, password: str) -> "DevConnectorClient":
        """登入並回傳帶 Token 的新 client (呼叫端負責關閉)"""
        data = self._request("POST", "/api/users/login", json={"email": email, "password": password})
        return self.with_credentials(Credentials(data["access_token"]))

    def logout(self) -> "DevConnectorClient":
        """回傳未登入的新 client (呼叫端負責關閉)"""
        return self.with_credentials(Credentials())

    def register(self, name: str, email: str, password: str) -> Dict[str, Any]:
        payload = {"name": name, "email": email, "password": password, "password2": password}
        return self._request("POST", "/api/users/register", json=payload)

    # --- Profile ---
    def get_current_profile(self) -> Dict[str, Any]:
        return self._request("GET", "/api/profile")

    def get_profile_by_handle(self, handle: str) -> Dict[str, Any]:
        return self._request("GET", f"/api/profile/handle/{handle}")

    def get_profile_by_user_id(self, user_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/api/profile/user/{user_id}")

    def get_profiles(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/api/profile/all")

    def create_profile(self, profile_data: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/api/profile", json=profile_data)

    def add_experience(self, experience_data: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/api/profile/experience", json=experience_data)

    def add_education(self, education_data: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/api/profile/education", json=education_data)

    def delete_experience(self, exp_id: str) -> Dict[str, Any]:
        return self._request("DELETE", f"/api/profile/experience/{exp_id}")

    def delete_education(self, edu_id: str) -> Dict[str, Any]:
        return self._request("DELETE", f"/api/profile/education/{edu_id}")

    def delete_account(self) -> "DevConnectorClient":
        """刪除 Profile 與帳號，回傳已登出的新 client (呼叫端負責關閉)"""
        self._request("DELETE", "/api/profile", params={"delete_account": "true"})
        return self.logout()
