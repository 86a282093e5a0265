"""Endpoints for registration, login and account maintenance."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from cyberhunter.application.use_cases.auth import (
    AuthenticationStatus,
    authenticate_user,
    change_password,
    issue_access_token,
    record_login,
    register_user,
    request_password_reset,
    resend_verification,
    reset_password,
    update_profile,
    verify_email,
)
from cyberhunter.config import get_settings
from cyberhunter.domain.entities import User
from cyberhunter.infrastructure.database import get_db
from cyberhunter.infrastructure.email import send_password_reset_email, send_verification_email
from cyberhunter.interfaces.api.dependencies import get_current_active_user
from cyberhunter.interfaces.api.schemas import (
    ForgotPasswordRequest,
    LoginRequest,
    MessageResponse,
    PasswordChangeRequest,
    ProfileUpdate,
    RegisterRequest,
    ResetPasswordRequest,
    Token,
    UserRead,
)

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)

_PASSWORD_RESET_MESSAGE = "If the email is registered, a password reset link has been sent."


def _session_payload(user: User) -> dict:
    return {
        "success": True,
        "token": issue_access_token(user),
        "user": UserRead.model_validate(user),
    }


def _login(db: Session, email: str, password: str) -> User:
    user, auth_status = authenticate_user(db, email, password)
    if auth_status is AuthenticationStatus.INVALID_CREDENTIALS:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if auth_status is AuthenticationStatus.INACTIVE:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User account is deactivated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    record_login(db, user.id)
    return user


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    """Create an account and email the verification link."""

    user, verification_token = register_user(
        db,
        name=payload.name,
        email=payload.email,
        password=payload.password,
        role=payload.role,
    )
    if not send_verification_email(user.email, user.name, verification_token):
        logger.warning("Could not send the verification email to user %s", user.id)
    return _session_payload(user)


@router.post("/login")
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    return _session_payload(_login(db, payload.email, payload.password))


# OAuth2 password flow used by the interactive docs.
@router.post("/token", response_model=Token)
def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db),
):
    user = _login(db, form_data.username, form_data.password)
    return Token(access_token=issue_access_token(user), role=user.role.value)


@router.get("/me")
def read_current_user(current_user: User = Depends(get_current_active_user)):
    return {"success": True, "user": UserRead.model_validate(current_user)}


@router.put("/profile")
def edit_profile(
    payload: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    user = update_profile(
        db,
        user=current_user,
        name=payload.name,
        bio=payload.bio,
        skills=payload.skills,
        avatar=payload.avatar,
    )
    return {"success": True, "user": UserRead.model_validate(user)}


@router.put("/password")
def update_password(
    payload: PasswordChangeRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    """Change the password and hand back a token bound to the new one."""

    user = change_password(
        db,
        user=current_user,
        current_password=payload.current_password,
        new_password=payload.new_password,
    )
    return _session_payload(user)


@router.post("/logout", response_model=MessageResponse)
def logout(_: User = Depends(get_current_active_user)) -> MessageResponse:
    return MessageResponse(message="Logged out successfully")


@router.post(
    "/forgot-password",
    response_model=MessageResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
def forgot_password(
    payload: ForgotPasswordRequest,
    db: Session = Depends(get_db),
) -> MessageResponse:
    """Email a reset link; the answer is the same whether or not the email exists."""

    try:
        user, reset_token = request_password_reset(db, email=payload.email)
    except ValueError as exc:
        logger.info("Password reset request ignored for %s: %s", payload.email, exc)
        return MessageResponse(message=_PASSWORD_RESET_MESSAGE)

    expires_minutes = get_settings().password_reset_expire_minutes
    if not send_password_reset_email(user.email, user.name, reset_token, expires_minutes):
        logger.warning("Could not send the password reset email to user %s", user.id)
    return MessageResponse(message=_PASSWORD_RESET_MESSAGE)


@router.post("/reset-password/{token}")
def complete_password_reset(
    token: str,
    payload: ResetPasswordRequest,
    db: Session = Depends(get_db),
):
    user = reset_password(db, token=token, password=payload.password)
    return _session_payload(user)


@router.get("/verify-email/{token}", response_model=MessageResponse)
def confirm_email(token: str, db: Session = Depends(get_db)) -> MessageResponse:
    verify_email(db, token=token)
    return MessageResponse(message="Email verified successfully")


@router.post("/resend-verification", response_model=MessageResponse)
def resend_verification_email(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> MessageResponse:
    user, verification_token = resend_verification(db, user=current_user)
    if not send_verification_email(user.email, user.name, verification_token):
        logger.warning("Could not send the verification email to user %s", user.id)
    return MessageResponse(message="Verification email sent")
