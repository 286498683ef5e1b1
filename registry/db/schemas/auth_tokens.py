from pydantic import BaseModel, ConfigDict, field_validator


class AuthTokenCreate(BaseModel):
    id: str
    author: str
    access_token: str

    @field_validator("id", "author", "access_token")
    @classmethod
    def _not_blank(cls, v: str):
        if not v or not v.strip():
            raise ValueError("must not be blank")
        return v


class AuthToken(BaseModel):
    id: str
    author: str
    access_token: str

    model_config = ConfigDict(from_attributes=True)
