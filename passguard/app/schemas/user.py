# passguard/app/schemas/user.py
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict


# Request bodies keep every field optional so the account service can
# answer with its own 400 messages instead of a generic 422
class RegisterRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class ResendOtpRequest(BaseModel):
    email: Optional[str] = None


class VerifyOtpRequest(BaseModel):
    email: Optional[str] = None
    # Clients send the code as a string or a number
    otp: Optional[Union[str, int]] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


# Returned to the client (never the password hash)
class UserResponse(BaseModel):
    id: int
    name: str
    email: str

    model_config = ConfigDict(from_attributes=True)


class RegisterResponse(BaseModel):
    message: str
    email: str


class AuthResponse(BaseModel):
    message: str
    token: str
    user: UserResponse


class TokenPayload(BaseModel):
    sub: Optional[str] = None
