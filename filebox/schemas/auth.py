from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from filebox.utils.validators import PasswordValidationError, clean_name, validate_password_complexity


class UserRegisterRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(min_length=8)

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        cleaned = clean_name(v)
        if cleaned is None:
            raise ValueError('Name must not be blank')
        return cleaned

    @field_validator('password')
    @classmethod
    def validate_password(cls, v: str) -> str:
        """Validate password complexity"""
        try:
            validate_password_complexity(v)
        except PasswordValidationError as e:
            # Field validators only turn ValueError/TypeError into 422 responses
            raise ValueError('; '.join(e.errors))
        return v


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    created_at: datetime

    # Allows UserResponse.model_validate(user) on a SQLAlchemy User object
    model_config = ConfigDict(from_attributes=True)


class UserLoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
