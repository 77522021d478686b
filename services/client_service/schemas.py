from typing import Optional

from pydantic import BaseModel, Field, field_validator

from libs.common.validators import reject_null


class ProfileUpdate(BaseModel):
    phone: Optional[str] = Field(None, min_length=1)
    name: Optional[str] = Field(None, min_length=1)
    location: Optional[str] = None
    password: Optional[str] = Field(None, min_length=6)

    @field_validator("phone", "name", "password", mode="before")
    @classmethod
    def not_null(cls, v):
        return reject_null(v)
