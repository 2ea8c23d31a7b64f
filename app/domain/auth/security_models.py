"""Models for two-factor, password recovery and deactivation."""

from pydantic import BaseModel, EmailStr, field_validator

from .account_models import validate_email, validate_password


class TotpProvisioning(BaseModel):
    secret: str
    uri: str


class EnableTotpParams(BaseModel):
    secret: str
    pin: str


class ResetPasswordParams(BaseModel):
    email: EmailStr

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        return validate_email(v)


class NewPasswordParams(BaseModel):
    password: str
    password_repeat: str
    token: str

    @field_validator("password")
    @classmethod
    def _password(cls, v: str) -> str:
        return validate_password(v)


class DeactivateParams(BaseModel):
    email: str
    password: str
    pin: str | None = None


class DeactivateResult(BaseModel):
    confirmation_needed: bool
    message: str
