from pydantic import BaseModel, Field

from app.domain.auth.account_models import UserResponse


class CreateUserIn(BaseModel):
    username: str = Field(description="Unique username, letters, digits and single dashes")
    email: str = Field(description="Email address, a verification link is sent to it")
    password: str = Field(description="Password, at least 8 characters")


class VerifyEmailIn(BaseModel):
    token: str = Field(description="Token from the verification email")


class ChangeEmailIn(BaseModel):
    email: str = Field(description="New email address")


class ChangePasswordIn(BaseModel):
    old_password: str = Field(description="Current password")
    new_password: str = Field(description="New password, at least 8 characters")


class LoginIn(BaseModel):
    login: str = Field(description="Username or email")
    password: str
    pin: str | None = Field(default=None, description="Current TOTP code, required when two-factor is enabled")


class LoginOut(BaseModel):
    user: UserResponse


class RemoveSessionIn(BaseModel):
    session_id: str = Field(description="Session to revoke, must not be the current one")


class EnableTotpIn(BaseModel):
    secret: str = Field(description="Secret returned by generate")
    pin: str = Field(description="Current code from the authenticator app")


class ResetPasswordIn(BaseModel):
    email: str


class NewPasswordIn(BaseModel):
    password: str
    password_repeat: str
    token: str = Field(description="Token from the password recovery email")


class DeactivateIn(BaseModel):
    email: str
    password: str
    pin: str | None = Field(default=None, description="Confirmation code, omit to request one")


class ChangeProfileInfoIn(BaseModel):
    username: str
    display_name: str
    bio: str | None = None


class SocialLinkIn(BaseModel):
    title: str
    url: str


class UpdateSocialLinkIn(SocialLinkIn):
    link_id: str


class SocialLinkOrderIn(BaseModel):
    link_id: str
    position: int = Field(ge=1)


class ReorderSocialLinksIn(BaseModel):
    links: list[SocialLinkOrderIn]


class RemoveSocialLinkIn(BaseModel):
    link_id: str

