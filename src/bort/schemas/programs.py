from datetime import datetime
from typing import Literal

import pydantic

class Program(pydantic.BaseModel):
    id: str
    bot_id: str
    language: str
    code: str
    created_at: datetime
    updated_at: datetime

class ProgramUpsertRequest(pydantic.BaseModel):
    bot_id: str = pydantic.Field(..., min_length=1)
    language: Literal["python"] = "python"
    code: str = pydantic.Field(..., min_length=1)

class DownloadTokenResponse(pydantic.BaseModel):
    token: str
