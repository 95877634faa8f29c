"""Login schemas"""

from pydantic import BaseModel, field_validator

from ...shared.validators import validate_email, validate_phone


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def validate_email_field(cls, v):
        return validate_email(v)


class PatientLoginRequest(BaseModel):
    phone: str
    password: str

    @field_validator("phone")
    @classmethod
    def validate_phone_field(cls, v):
        return validate_phone(v)
