from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator
from pydantic.networks import validate_email
from pydantic_core import PydanticCustomError
from typing import Optional

from blog_api.schemas.common import Uri, blank_to_none


# ============================================================
# Request Schemas (What client sends)
# ============================================================

class UserRegister(BaseModel):
    """Schema for user registration request"""

    fullname: str = Field(min_length=1, max_length=100)
    username: str = Field(min_length=1, max_length=50)
    email: EmailStr
    # password is required only when social_id is absent
    password: Optional[str] = Field(None, min_length=6, max_length=255)
    social_id: Optional[str] = None  # present for Google / Facebook etc.
    country_code: Optional[str] = Field(None, max_length=10)
    phone: Optional[str] = Field(None, max_length=20)
    profile_pic: Optional[Uri] = None

    @field_validator(
        "password", "social_id", "country_code", "phone", "profile_pic",
        mode="before",
    )
    @classmethod
    def empty_as_missing(cls, v):
        return blank_to_none(v)

    @field_validator("email")
    @classmethod
    def validate_email_length(cls, v: str) -> str:
        if len(v) > 100:
            raise ValueError('"email" length must be less than or equal to 100 characters long')
        return v

    @model_validator(mode="after")
    def require_password_for_normal_login(self):
        if not self.social_id and not self.password:
            raise ValueError('"password" is required')
        if self.social_id:
            self.password = None
        return self

    class Config:
        json_schema_extra = {
            "example": {
                "fullname": "Jane Doe",
                "username": "jane_doe",
                "email": "jane@mail.com",
                "password": "secret123",
                "country_code": "+91",
                "phone": "9876543210"
            }
        }


def normalize_login(value: str) -> str:
    """
    Emails are stored the way EmailStr normalizes them (lowercase domain),
    so an email login goes through the same normalization. Phone numbers
    and strings that are not valid emails are looked up as sent.
    """
    if "@" not in value:
        return value
    try:
        _, email = validate_email(value)
    except PydanticCustomError:
        return value
    return email


class UserLogin(BaseModel):
    """Schema for user login request (email or phone, or social id)"""

    login_email_phone: Optional[str] = None
    password: Optional[str] = None
    social_id: Optional[str] = None

    @field_validator("social_id", mode="before")
    @classmethod
    def empty_as_missing(cls, v):
        return blank_to_none(v)

    @model_validator(mode="after")
    def check_credentials(self):
        if self.login_email_phone is None:
            raise ValueError("Email or phone is required")
        self.login_email_phone = self.login_email_phone.strip()
        if not self.login_email_phone:
            raise ValueError("Email or phone cannot be empty")
        self.login_email_phone = normalize_login(self.login_email_phone)

        if self.social_id:
            return self
        if not self.password:
            raise ValueError("Password is required for normal login")
        if len(self.password) < 6:
            raise ValueError("Password must be at least 6 characters")
        if len(self.password) > 255:
            raise ValueError('"password" length must be less than or equal to 255 characters long')
        return self

    class Config:
        json_schema_extra = {
            "example": {
                "login_email_phone": "jane@mail.com",
                "password": "secret123"
            }
        }


class PasswordChange(BaseModel):
    """Schema for changing a password with proof of the old one"""

    old_password: str = Field(min_length=1)
    new_password: str = Field(min_length=6, max_length=255)


class PasswordReset(BaseModel):
    """Schema for setting a new password from an active session"""

    new_password: str = Field(min_length=6, max_length=255)


class ProfileUpdate(BaseModel):
    """Schema for editing the caller's profile. Only provided fields change."""

    fullname: Optional[str] = Field(None, max_length=100)
    username: Optional[str] = Field(
        None,
        min_length=3,
        max_length=30,
        pattern=r"^[a-zA-Z0-9_]+$",
    )
    email: Optional[EmailStr] = None
    country_code: Optional[str] = Field(None, max_length=10)
    phone: Optional[str] = Field(None, max_length=20)
    profile_pic: Optional[Uri] = None

    @field_validator(
        "fullname", "username", "email", "country_code", "phone", "profile_pic",
        mode="before",
    )
    @classmethod
    def empty_as_missing(cls, v):
        return blank_to_none(v)


# ============================================================
# Response Schemas (What server sends back)
# ============================================================

class UserSummary(BaseModel):
    """Identity returned after register and profile edits (NO password!)"""

    id: int
    email: str
    username: str

    class Config:
        from_attributes = True  # Allow creating from ORM model


class LoginUser(UserSummary):
    token: str


class LoginData(BaseModel):
    user: LoginUser


class TokenIdentity(BaseModel):
    """Identity carried by a verified access token."""

    id: int
    email: Optional[str] = None
    username: Optional[str] = None
