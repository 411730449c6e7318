from pydantic import BaseModel, EmailStr, Field, field_validator


class ContactForm(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    message: str = Field(min_length=10, max_length=500)

    @field_validator("name")
    @classmethod
    def _single_line(cls, value: str) -> str:
        # The name ends up in the From header
        if any(ord(ch) < 32 or ord(ch) == 127 for ch in value):
            raise ValueError("Name must not contain control characters")
        return value


class ContactResponse(BaseModel):
    message: str
