from datetime import datetime

from pydantic import BaseModel, Field, field_validator


class UserCreate(BaseModel):
    firstname: str = Field(min_length=1, max_length=100)
    lastname: str = Field(min_length=1, max_length=100)
    email: str = Field(min_length=3, max_length=255)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        value = value.strip().lower()
        if "@" not in value:
            raise ValueError("invalid email")
        return value


class UserResponse(BaseModel):
    id: int
    firstname: str
    lastname: str
    email: str
    created_at: datetime | None = None

    class Config:
        from_attributes = True


class UserCreatedResponse(UserResponse):
    access_token: str
    token_type: str = "bearer"
