"""Use cases for registration, login and account maintenance."""

from .authenticate_user import (
    AuthenticationStatus,
    authenticate_user,
    issue_access_token,
    record_login,
)
from .register_user import ensure_password_strength, register_user
from .reset_password import request_password_reset, reset_password
from .update_profile import change_password, normalize_skills, update_profile
from .verify_email import resend_verification, verify_email

__all__ = [
    "AuthenticationStatus",
    "authenticate_user",
    "change_password",
    "ensure_password_strength",
    "issue_access_token",
    "normalize_skills",
    "record_login",
    "register_user",
    "request_password_reset",
    "resend_verification",
    "reset_password",
    "update_profile",
    "verify_email",
]
