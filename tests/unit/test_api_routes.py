"""
Unit tests for API routes.

Tests endpoint responses with mocked dependencies.
"""

from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from otpgate.api.dependencies import get_registration_service, get_upload_store
from otpgate.api.errors import register_exception_handlers
from otpgate.api.routes import router
from otpgate.domain.exceptions import (
    ExpiredToken,
    HashingFailed,
    MalformedToken,
    MissingToken,
    NotificationFailed,
    OtpMismatch,
    StorageFailed,
    TamperedToken,
    TokenIssueFailed,
    UploadRejected,
)
from otpgate.domain.models import ConfirmedIdentity, FileReference, RegistrationDetails
from otpgate.domain.registration import Confirmation, RegistrationService, StagedRegistration

FILE = FileReference(
    filename="profilePic-1700000000000-0badf00d.jpg",
    original_filename="me.jpg",
    path="/srv/uploads/profilePic-1700000000000-0badf00d.jpg",
)

FORM = {
    "name": "Alan Turing",
    "email": "alan@example.com",
    "mobile": "5550123",
    "password": "enigma1912",
    "city": "Wilmslow",
    "age": "41",
    "role": "user",
}


def image(name: str = "me.jpg", content_type: str = "image/jpeg") -> dict:
    return {"profilePic": (name, b"\xff\xd8\xff\xe0fake", content_type)}


@pytest.fixture
def mock_service() -> MagicMock:
    service = MagicMock(spec=RegistrationService)
    service.pending_ttl_seconds = 3600
    service.stage.return_value = StagedRegistration(token="pending.jwt.token", file_name=FILE.filename)
    service.confirm.return_value = Confirmation(
        auth_token="auth.jwt.token",
        identity=MagicMock(spec=ConfirmedIdentity),
        record_id=1,
    )
    return service


@pytest.fixture
def mock_uploads() -> MagicMock:
    uploads = MagicMock()
    uploads.save.return_value = FILE
    return uploads


@pytest.fixture
def app(mock_service: MagicMock, mock_uploads: MagicMock) -> FastAPI:
    """Create test FastAPI application."""
    test_app = FastAPI()
    register_exception_handlers(test_app)
    test_app.include_router(router)
    test_app.dependency_overrides[get_registration_service] = lambda: mock_service
    test_app.dependency_overrides[get_upload_store] = lambda: mock_uploads
    return test_app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Create test client for the application."""
    return TestClient(app)


class TestRegisterEndpoint:
    """Tests for POST /register endpoint."""

    def test_register_success_returns_200(self, client: TestClient, mock_service: MagicMock) -> None:
        response = client.post("/register", data=FORM, files=image())

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "message": "Registration submitted!",
            "token": "pending.jwt.token",
            "file": FILE.filename,
        }
        mock_service.stage.assert_called_once_with(RegistrationDetails(**FORM), FILE)

    def test_register_sets_token_cookie(self, client: TestClient) -> None:
        response = client.post("/register", data=FORM, files=image())

        cookie = response.headers["set-cookie"]
        assert cookie.startswith("token=pending.jwt.token")
        assert "HttpOnly" in cookie
        assert "Max-Age=3600" in cookie
        assert "samesite=strict" in cookie.lower()
        assert "secure" not in cookie.lower().replace("samesite", "")

    def test_register_passes_upload_to_store(self, client: TestClient, mock_uploads: MagicMock) -> None:
        client.post("/register", data=FORM, files=image("avatar.png", "image/png"))

        _, original_filename, content_type = mock_uploads.save.call_args[0]
        assert original_filename == "avatar.png"
        assert content_type == "image/png"

    def test_register_without_role(self, client: TestClient, mock_service: MagicMock) -> None:
        form = {k: v for k, v in FORM.items() if k != "role"}

        response = client.post("/register", data=form, files=image())

        assert response.status_code == 200
        staged_details = mock_service.stage.call_args[0][0]
        assert staged_details.role is None

    def test_missing_file_returns_400(self, client: TestClient, mock_uploads: MagicMock) -> None:
        response = client.post("/register", data=FORM)

        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "File upload failed!"}
        mock_uploads.save.assert_not_called()

    @pytest.mark.parametrize("field", ["name", "email", "mobile", "password", "city", "age"])
    def test_missing_field_returns_400(
        self, client: TestClient, mock_service: MagicMock, mock_uploads: MagicMock, field: str
    ) -> None:
        form = {k: v for k, v in FORM.items() if k != field}

        response = client.post("/register", data=form, files=image())

        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "All fields are required!"}
        mock_uploads.save.assert_not_called()
        mock_service.stage.assert_not_called()

    def test_missing_file_checked_before_fields(self, client: TestClient) -> None:
        response = client.post("/register", data={"name": "Alan"})

        assert response.json()["message"] == "File upload failed!"

    def test_upload_rejected_returns_400(self, client: TestClient, mock_uploads: MagicMock) -> None:
        mock_uploads.save.side_effect = UploadRejected("Only JPEG, JPG, and PNG files are allowed!")

        response = client.post("/register", data=FORM, files=image("doc.pdf", "application/pdf"))

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "message": "Only JPEG, JPG, and PNG files are allowed!",
        }
        assert "set-cookie" not in response.headers

    def test_notification_failure_returns_500(self, client: TestClient, mock_service: MagicMock) -> None:
        mock_service.stage.side_effect = NotificationFailed()

        response = client.post("/register", data=FORM, files=image())

        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "Failed to send OTP."}
        assert "set-cookie" not in response.headers

    def test_token_failure_returns_500(self, client: TestClient, mock_service: MagicMock) -> None:
        mock_service.stage.side_effect = TokenIssueFailed()

        response = client.post("/register", data=FORM, files=image())

        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "Failed to generate token."}

    def test_hashing_failure_returns_500(self, client: TestClient, mock_service: MagicMock) -> None:
        mock_service.stage.side_effect = HashingFailed()

        response = client.post("/register", data=FORM, files=image())

        assert response.status_code == 500
        assert response.json()["success"] is False


class TestVerifyOtpEndpoint:
    """Tests for POST /verify-otp endpoint."""

    def test_verify_success_returns_200(self, client: TestClient, mock_service: MagicMock) -> None:
        client.cookies.set("token", "pending.jwt.token")

        response = client.post("/verify-otp", json={"otp": "123456"})

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "message": "OTP verified successfully",
            "authToken": "auth.jwt.token",
        }
        mock_service.confirm.assert_called_once_with("pending.jwt.token", "123456")

    def test_numeric_otp_is_accepted(self, client: TestClient, mock_service: MagicMock) -> None:
        client.cookies.set("token", "pending.jwt.token")

        client.post("/verify-otp", json={"otp": 123456})

        mock_service.confirm.assert_called_once_with("pending.jwt.token", "123456")

    def test_missing_token_returns_400(self, client: TestClient, mock_service: MagicMock) -> None:
        response = client.post("/verify-otp", json={"otp": "123456"})

        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "Token and OTP are required."}
        mock_service.confirm.assert_not_called()

    @pytest.mark.parametrize("body", [{}, {"otp": ""}, {"otp": None}])
    def test_missing_otp_returns_400(self, client: TestClient, mock_service: MagicMock, body: dict) -> None:
        client.cookies.set("token", "pending.jwt.token")

        response = client.post("/verify-otp", json=body)

        assert response.status_code == 400
        assert response.json()["message"] == "Token and OTP are required."
        mock_service.confirm.assert_not_called()

    def test_empty_body_returns_400(self, client: TestClient) -> None:
        client.cookies.set("token", "pending.jwt.token")

        response = client.post("/verify-otp")

        assert response.status_code == 400

    def test_wrong_otp_returns_400(self, client: TestClient, mock_service: MagicMock) -> None:
        mock_service.confirm.side_effect = OtpMismatch()
        client.cookies.set("token", "pending.jwt.token")

        response = client.post("/verify-otp", json={"otp": "000000"})

        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "Invalid OTP."}

    @pytest.mark.parametrize("error", [MissingToken, MalformedToken, TamperedToken, ExpiredToken])
    def test_token_errors_share_one_message(
        self, client: TestClient, mock_service: MagicMock, error: type
    ) -> None:
        """All token failures look identical to the client."""
        mock_service.confirm.side_effect = error("detail that must not leak")
        client.cookies.set("token", "pending.jwt.token")

        response = client.post("/verify-otp", json={"otp": "123456"})

        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "Invalid token."}
        assert "leak" not in response.text

    def test_storage_failure_returns_500(self, client: TestClient, mock_service: MagicMock) -> None:
        mock_service.confirm.side_effect = StorageFailed()
        client.cookies.set("token", "pending.jwt.token")

        response = client.post("/verify-otp", json={"otp": "123456"})

        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "Failed to store the data."}
