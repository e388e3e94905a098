"""
Pydantic schemas for authentication endpoints.
"""
from typing import Optional
from pydantic import BaseModel, EmailStr, Field, field_validator


class SignupRequest(BaseModel):
    """Request schema for recruiter signup."""
    full_name: str = Field(..., min_length=1, max_length=200, description="Recruiter's full name")
    email: EmailStr = Field(..., description="Recruiter's email address")
    password: str = Field(..., min_length=8, description="Password (min 8 characters)")
    company_name: Optional[str] = Field(default=None, max_length=200, description="Hiring company")

    @field_validator("password")
    @classmethod
    def validate_password_length(cls, v: str) -> str:
        """Validate password length in bytes (bcrypt limit is 72 bytes)."""
        if len(v.encode("utf-8")) > 72:
            raise ValueError("Password too long (bcrypt limit 72 bytes)")
        return v

    model_config = {
        "json_schema_extra": {
            "example": {
                "full_name": "Ana Pérez",
                "email": "ana@acme.com",
                "password": "SecurePass123",
                "company_name": "Acme",
            }
        }
    }


class SignupResponse(BaseModel):
    message: str
    user_id: int


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
