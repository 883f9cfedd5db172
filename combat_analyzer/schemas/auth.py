from pydantic import EmailStr, Field

from .athlete import AthleteName, AthleteResponse
from .base import CamelModel


class RegisterRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)
    name: AthleteName


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)


class UserResponse(CamelModel):
    id: int
    email: str


class MeResponse(CamelModel):
    user: UserResponse
    athlete: AthleteResponse | None = None


class AuthResponse(MeResponse):
    token: str
