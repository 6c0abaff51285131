import fastapi
from fastapi import APIRouter
from fastapi import Depends
from fastapi.concurrency import run_in_threadpool
from openai import OpenAI

from bort.config import Settings
from bort.schemas.chat import ChatMessageRequest
from bort.schemas.chat import ChatMessageResponse
from bort.services import chat
from bort import utils

async def send_message_endpoint(
    request: ChatMessageRequest,
    llm_client: OpenAI | None = Depends(utils.get_llm_client),
    settings: Settings = Depends(utils.get_settings)
) -> ChatMessageResponse:
    """
    Reply to a chat message, through the language model when one is configured.
    Model failures fall back to the local rule-based reply. The model call blocks,
    so it runs on the threadpool.
    """
    reply = await run_in_threadpool(
        chat.generate_reply,
        request.message,
        client=llm_client,
        model=settings.openai_model
    )
    return ChatMessageResponse(reply=reply)

def factory(app: fastapi.FastAPI) -> APIRouter:
    router = APIRouter(prefix="/chat", tags=["chat"])

    router.add_api_route(
        "/messages",
        send_message_endpoint,
        methods=["POST"],
        response_model=ChatMessageResponse
    )

    return router
