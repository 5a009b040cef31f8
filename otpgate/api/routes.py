"""
API routes - Registration and OTP verification endpoints.

This module defines the HTTP endpoints:
- POST /register - Stage a registration and email the OTP
- POST /verify-otp - Confirm the OTP and persist the registration

Handlers are plain ``def`` functions so FastAPI runs password hashing,
email delivery and the database insert in its threadpool.
"""

from fastapi import APIRouter, Body, Cookie, Depends, File, Form, Response, UploadFile, status

from otpgate.api.dependencies import get_registration_service, get_upload_store
from otpgate.api.models import ErrorResponse, RegisterResponse, VerifyOtpRequest, VerifyOtpResponse
from otpgate.domain.exceptions import MissingFile, MissingVerificationInput
from otpgate.domain.models import RegistrationDetails
from otpgate.domain.ports import ProfileImageStore
from otpgate.domain.registration import RegistrationService

router = APIRouter(tags=["registration"])

TOKEN_COOKIE = "token"
FILE_FIELD = "profilePic"


@router.post(
    "/register",
    response_model=RegisterResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Missing file or field, or upload rejected"},
        500: {"model": ErrorResponse, "description": "OTP delivery or token signing failed"},
    },
    summary="Submit a registration",
    description="Submit profile fields and a profile image. An OTP is emailed and the "
    "pending registration is returned as a signed token, also set as the `token` cookie.",
)
def register(
    response: Response,
    name: str | None = Form(None),
    email: str | None = Form(None),
    mobile: str | None = Form(None),
    password: str | None = Form(None),
    city: str | None = Form(None),
    age: str | None = Form(None),
    role: str | None = Form(None),
    profile_pic: UploadFile | None = File(None, alias=FILE_FIELD),
    service: RegistrationService = Depends(get_registration_service),
    uploads: ProfileImageStore = Depends(get_upload_store),
) -> RegisterResponse:
    """
    Stage a registration and send its OTP.

    Checks run in order: file present, fields present, upload accepted.
    """
    if profile_pic is None or not profile_pic.filename:
        raise MissingFile()

    details = RegistrationDetails(
        name=name,
        email=email,
        mobile=mobile,
        password=password,
        city=city,
        age=age,
        role=role,
    )
    details.require_complete()

    file = uploads.save(profile_pic.file, profile_pic.filename, profile_pic.content_type)
    staged = service.stage(details, file)

    response.set_cookie(
        key=TOKEN_COOKIE,
        value=staged.token,
        max_age=service.pending_ttl_seconds,
        httponly=True,
        secure=False,
        samesite="strict",
    )
    return RegisterResponse(
        message="Registration submitted!",
        token=staged.token,
        file=staged.file_name,
    )


@router.post(
    "/verify-otp",
    response_model=VerifyOtpResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Missing input, invalid token or invalid OTP"},
        500: {"model": ErrorResponse, "description": "Storage failed"},
    },
    status_code=status.HTTP_200_OK,
    summary="Verify the OTP",
    description="Submit the OTP received by email. The pending registration is read from "
    "the `token` cookie and stored once the OTP matches.",
)
def verify_otp(
    request_data: VerifyOtpRequest | None = Body(None),
    token: str | None = Cookie(None),
    service: RegistrationService = Depends(get_registration_service),
) -> VerifyOtpResponse:
    """
    Confirm a pending registration.

    A wrong OTP leaves the token usable for another attempt.
    """
    otp = request_data.otp if request_data is not None else None
    if not token or not otp:
        raise MissingVerificationInput()

    confirmation = service.confirm(token, otp)
    return VerifyOtpResponse(
        message="OTP verified successfully",
        authToken=confirmation.auth_token,
    )
