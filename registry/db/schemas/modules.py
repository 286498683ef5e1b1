from pydantic import BaseModel, ConfigDict, field_validator
from typing import Optional


class ModuleBase(BaseModel):
    author: str
    name: str
    description: str = ""


class ModuleCreate(ModuleBase):
    latest: Optional[str] = None

    @field_validator("author", "name")
    @classmethod
    def _validate_key_part(cls, v: str):
        # Natural key is case-sensitive, so only surrounding whitespace is rejected
        if not v or v != v.strip():
            raise ValueError("must be non-empty without surrounding whitespace")
        return v


class Module(ModuleBase):
    id: int
    latest: Optional[str] = None
    featured: bool = False

    model_config = ConfigDict(from_attributes=True)


class ModuleSearchResult(BaseModel):
    module: Module
    downloads: int = 0

    @classmethod
    def from_row(cls, module, downloads) -> "ModuleSearchResult":
        return cls(module=Module.model_validate(module), downloads=int(downloads or 0))
