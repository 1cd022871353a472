"""Input rules shared by signup and password reset."""

from domain.model.errors import ValidationError

MIN_PASSWORD_LENGTH = 8


def validate_email(email: str | None) -> None:
    if not email or not email.strip():
        raise ValidationError("Email is required")


def validate_password(password: str | None) -> None:
    if not password:
        raise ValidationError("Password is required")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
