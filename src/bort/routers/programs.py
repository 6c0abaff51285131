import secrets

import fastapi
from fastapi import APIRouter
from fastapi import Depends
from fastapi import HTTPException
from fastapi.responses import PlainTextResponse

from bort.modules import database
from bort.schemas.bots import OkResponse
from bort.schemas.programs import DownloadTokenResponse
from bort.schemas.programs import Program
from bort.schemas.programs import ProgramUpsertRequest
from bort import utils

def create_download_token(program_id: str) -> str:
    return f"{program_id}.{secrets.token_hex(6)}"

def parse_download_token(token: str) -> str | None:
    """
    Extract the program id from a "<programId>.<nonce>" token.
    The nonce never contains a dot, so the program id is everything before the last one.

    Returns:
        Program id, None if the token is malformed
    """
    program_id, separator, nonce = token.rpartition(".")
    if not program_id or not separator or not nonce:
        return None
    return program_id

def download_filename(program: Program) -> str:
    extension = "py" if program.language == "python" else "txt"
    return f"bot_{program.bot_id}.{extension}"

async def list_programs_endpoint(
    bot_id: str,
    db: database.Database = Depends(utils.get_database)
) -> list[Program]:
    return database.list_programs_by_bot(db, bot_id)

async def upsert_program_endpoint(
    program_id: str,
    request: ProgramUpsertRequest,
    db: database.Database = Depends(utils.get_database)
) -> OkResponse:
    database.upsert_program(db, program_id, request.bot_id, request.language, request.code)
    return OkResponse()

async def remove_program_endpoint(
    program_id: str,
    db: database.Database = Depends(utils.get_database)
) -> OkResponse:
    database.delete_program(db, program_id)
    return OkResponse()

async def create_download_token_endpoint(program_id: str) -> DownloadTokenResponse:
    return DownloadTokenResponse(token=create_download_token(program_id))

async def download_program_endpoint(
    token: str,
    db: database.Database = Depends(utils.get_database)
) -> PlainTextResponse:
    """
    Serve a stored program as a plain text attachment.

    Args:
        token: Download token of the form "<programId>.<nonce>"
        db: Database connection

    Returns:
        PlainTextResponse with the program code, named bot_<botId>.py for Python

    Raises:
        HTTPException: 400 if the token is malformed, 404 if the program does not exist
    """
    program_id = parse_download_token(token)
    if program_id is None:
        raise HTTPException(status_code=400, detail="Bad token")

    program = database.get_program(db, program_id)
    if program is None:
        raise HTTPException(status_code=404, detail="Not found")

    return PlainTextResponse(
        program.code,
        headers={"Content-Disposition": f'attachment; filename="{download_filename(program)}"'}
    )

def factory(app: fastapi.FastAPI) -> APIRouter:
    """
    Create and configure the programs API router.

    Args:
        app: FastAPI application instance

    Returns:
        Configured APIRouter with program endpoints:
        - GET /bots/{bot_id}/programs - List programs of a bot
        - PUT /programs/{program_id} - Create or update a program
        - DELETE /programs/{program_id} - Remove a program
        - POST /programs/{program_id}/download-token - Create a download token
        - GET /programs/{token} - Download a program file
    """
    router = APIRouter(tags=["programs"])

    router.add_api_route(
        "/bots/{bot_id}/programs",
        list_programs_endpoint,
        methods=["GET"],
        response_model=list[Program]
    )

    router.add_api_route(
        "/programs/{program_id}",
        upsert_program_endpoint,
        methods=["PUT"],
        response_model=OkResponse
    )

    router.add_api_route(
        "/programs/{program_id}",
        remove_program_endpoint,
        methods=["DELETE"],
        response_model=OkResponse
    )

    router.add_api_route(
        "/programs/{program_id}/download-token",
        create_download_token_endpoint,
        methods=["POST"],
        response_model=DownloadTokenResponse
    )

    router.add_api_route(
        "/programs/{token}",
        download_program_endpoint,
        methods=["GET"],
        response_class=PlainTextResponse
    )

    return router
