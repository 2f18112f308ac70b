from typing import List

from pydantic import BaseModel


class SendOTPRequest(BaseModel):
    email: str | None = None


class SignupRequest(BaseModel):
    email: str | None = None
    password: str | None = None
    otp: str | None = None


class LoginRequest(BaseModel):
    email: str | None = None
    password: str | None = None


class ResetPasswordRequest(BaseModel):
    email: str | None = None
    otp: str | None = None
    newPassword: str | None = None


class ProfileRequest(BaseModel):
    email: str | None = None
    name: str | None = None
    phone: str | None = None
    age: str | int | None = None
    ageGroup: str | None = None
    dob: str | None = None
    country: str | None = None
    state: str | None = None
    city: str | None = None
    pincode: str | int | None = None
    role: str | None = None
    workTags: List[str] | str | None = None


class MessageResponse(BaseModel):
    message: str


class AccountMessageResponse(BaseModel):
    message: str
    email: str


class ProfileView(BaseModel):
    id: int
    email: str
    name: str = ""
    phone: str = ""
    age: str = ""
    ageGroup: str = ""
    dob: str = ""
    country: str = ""
    state: str = ""
    city: str = ""
    pincode: str = ""
    role: str = ""
    workTags: List[str] = []


class ProfileResponse(BaseModel):
    user: ProfileView


class StatsResponse(BaseModel):
    totalUsers: int
    helpers: int
    hirers: int
    readyToServe: int


class ErrorResponse(BaseModel):
    kind: str
    message: str
