"""HTTP client for the Employee Manager API.

Every employee call carries the stored bearer token. A 401 from the server
clears the stored session and raises LoginRequiredError so the caller can
send the user back to the login flow.
"""

import mimetypes
from pathlib import Path
from typing import Any, Dict, List, Optional

import httpx

from employee_manager.client.session import SessionStore

DEFAULT_API_URL = "http://localhost:5000"


class ApiError(Exception):
    def __init__(self, status_code: int, message: str, errors: Optional[List[Dict[str, str]]] = None):
        self.status_code = status_code
        self.message = message
        self.errors = errors or []
        super().__init__(message)

    @property
    def display_message(self) -> str:
        """Top-level message, or the first field error when one is present."""
        if self.errors:
            return self.errors[0].get("message") or self.message
        return self.message

    @classmethod
    def from_response(cls, response: httpx.Response) -> "ApiError":
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        message = body.get("message") or response.reason_phrase or "Request failed"
        return cls(response.status_code, message, body.get("errors"))


class LoginRequiredError(ApiError):
    def __init__(self, message: str = "Please log in to continue"):
        super().__init__(401, message)


class EmployeeApiClient:
    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        session: Optional[SessionStore] = None,
        transport: Optional[httpx.BaseTransport] = None,
        timeout: float = 10.0,
    ):
        self.session = session or SessionStore()
        self._http = httpx.Client(base_url=base_url.rstrip("/"), transport=transport, timeout=timeout)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "EmployeeApiClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _request(self, method: str, path: str, *, auth: bool = True, **kwargs) -> Any:
        headers = kwargs.pop("headers", {})
        if auth:
            token = self.session.token
            if not token:
                raise LoginRequiredError()
            headers["Authorization"] = f"Bearer {token}"

        response = self._http.request(method, path, headers=headers, **kwargs)

        if response.status_code == 401:
            self.session.clear()
            if auth:
                raise LoginRequiredError(ApiError.from_response(response).message)
        if response.status_code >= 400:
            raise ApiError.from_response(response)
        return response.json()

    # Auth

    def _start_session(self, body: Dict[str, Any]) -> Dict[str, Any]:
        self.session.save(body["token"], body["user"])
        return body["user"]

    def signup(self, username: str, email: str, password: str) -> Dict[str, Any]:
        body = self._request(
            "POST", "/auth/signup", auth=False,
            json={"username": username, "email": email, "password": password},
        )
        return self._start_session(body)

    def login(self, email: str, password: str) -> Dict[str, Any]:
        body = self._request("POST", "/auth/login", auth=False, json={"email": email, "password": password})
        return self._start_session(body)

    def logout(self) -> None:
        self.session.clear()

    def me(self) -> Dict[str, Any]:
        return self._request("GET", "/auth/me")

    # Employees

    def list_employees(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/employees")

    def search_employees(self, department: Optional[str] = None, position: Optional[str] = None) -> List[Dict[str, Any]]:
        params = {k: v for k, v in (("department", department), ("position", position)) if v}
        return self._request("GET", "/employees/search", params=params)

    def get_employee(self, employee_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/employees/{employee_id}")

    def _submit(self, method: str, path: str, fields: Dict[str, Any], picture: Optional[Path]) -> Dict[str, Any]:
        data = {k: str(v) for k, v in fields.items() if v is not None}
        if picture is None:
            # The form endpoints accept urlencoded bodies as well as multipart
            return self._request(method, path, data=data)["employee"]
        picture = Path(picture)
        content_type = mimetypes.guess_type(picture.name)[0] or "application/octet-stream"
        with open(picture, "rb") as fh:
            body = self._request(method, path, data=data, files={"profilePicture": (picture.name, fh, content_type)})
        return body["employee"]

    def create_employee(self, fields: Dict[str, Any], picture: Optional[Path] = None) -> Dict[str, Any]:
        return self._submit("POST", "/employees", fields, picture)

    def update_employee(self, employee_id: str, fields: Dict[str, Any], picture: Optional[Path] = None) -> Dict[str, Any]:
        return self._submit("PUT", f"/employees/{employee_id}", fields, picture)

    def delete_employee(self, employee_id: str) -> str:
        return self._request("DELETE", f"/employees/{employee_id}")["message"]
