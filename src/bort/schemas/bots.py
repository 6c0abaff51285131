from datetime import datetime

import pydantic

from bort.schemas.specs import BotSpecs
from bort.schemas.specs import default_specs

class Bot(pydantic.BaseModel):
    id: str
    name: str
    description: str | None = None
    specs: BotSpecs
    created_at: datetime
    updated_at: datetime

class BotCreateRequest(pydantic.BaseModel):
    id: str = pydantic.Field(..., min_length=1)
    name: str = pydantic.Field(..., min_length=1)
    description: str | None = None
    specs: BotSpecs = pydantic.Field(default_factory=default_specs)

class BotSpecsUpdateRequest(pydantic.BaseModel):
    specs: BotSpecs

class OkResponse(pydantic.BaseModel):
    ok: bool = True
