import pydantic

class ChatMessageRequest(pydantic.BaseModel):
    message: str

class ChatMessageResponse(pydantic.BaseModel):
    reply: str
