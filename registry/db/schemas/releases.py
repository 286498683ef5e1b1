from datetime import datetime
from pydantic import BaseModel, ConfigDict, field_validator


class ReleaseCreate(BaseModel):
    module_id: int
    version: str
    code: str

    @field_validator("version")
    @classmethod
    def _validate_version(cls, v: str):
        # Part of the (module_id, version) key, stored exactly as given
        if not v or v != v.strip():
            raise ValueError("version must be non-empty without surrounding whitespace")
        return v


class Release(BaseModel):
    id: int
    module_id: int
    version: str
    downloads: int
    code: str
    published: datetime

    model_config = ConfigDict(from_attributes=True)
