from datetime import datetime
from typing import Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, Field, field_validator


def check_email_shape(value: Optional[str]) -> Optional[str]:
    """Reject malformed addresses but keep the value exactly as sent.

    The unique constraint on ``customer.email`` compares raw strings, so the
    normalized form from email-validator is never stored.
    """
    if value is None:
        return value
    try:
        validate_email(value, check_deliverability=False, allow_display_name=False)
    except EmailNotValidError as e:
        raise ValueError(f"Invalid email address: {e}")
    return value


class CustomerCreate(BaseModel):
    name: str = Field(min_length=1)
    email: str
    phone: str = Field(min_length=1)
    company: Optional[str] = None

    @field_validator("email")
    @classmethod
    def email_shape(cls, value):
        return check_email_shape(value)


class CustomerUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = Field(default=None, min_length=1)
    company: Optional[str] = None

    @field_validator("email")
    @classmethod
    def email_shape(cls, value):
        return check_email_shape(value)


class CustomerRead(BaseModel):
    id: int
    name: str
    email: str
    phone: str
    company: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    user_id: int

    class Config:
        from_attributes = True
