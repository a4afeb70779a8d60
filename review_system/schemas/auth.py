from pydantic import EmailStr, Field

from review_system.models.user import Role
from review_system.schemas.common import CamelModel


class RegisterRequest(CamelModel):
    username: str = Field(min_length=3, max_length=50)
    email: EmailStr
    password: str = Field(min_length=6, max_length=72)
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    role: Role = Role.EMPLOYEE


class LoginRequest(CamelModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class AuthResponse(CamelModel):
    token: str
    type: str = "Bearer"
    id: str
    username: str
    email: str
    role: str
