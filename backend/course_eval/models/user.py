from pydantic import EmailStr, Field

from .base import ApiModel, NonEmptyStr


class RegisterRequest(ApiModel):
    email: EmailStr
    password: str = Field(min_length=6)
    name: NonEmptyStr
    surname: NonEmptyStr
    student_register: NonEmptyStr
    school: NonEmptyStr


class LoginRequest(ApiModel):
    email: EmailStr
    password: str = Field(min_length=6)


class ForgotPasswordRequest(ApiModel):
    email: EmailStr


class ChangePasswordRequest(ApiModel):
    token_password: NonEmptyStr
    new_password: str = Field(min_length=6)
