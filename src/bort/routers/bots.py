import sqlite3

import fastapi
from fastapi import APIRouter
from fastapi import Depends
from fastapi import HTTPException

from bort.config import Settings
from bort.modules import database
from bort.schemas.bots import Bot
from bort.schemas.bots import BotCreateRequest
from bort.schemas.bots import BotSpecsUpdateRequest
from bort.schemas.bots import OkResponse
from bort.schemas.calibration import ArrayCalibrationResponse
from bort.schemas.calibration import CalibrationNotFoundResponse
from bort.schemas.calibration import CalibrationResponse
from bort.schemas.printing import AnimationFrameRequest
from bort.schemas.printing import AnimationFrameResponse
from bort.schemas.printing import ArrayPrintRequest
from bort.schemas.printing import ArrayPrintResponse
from bort.services import animation
from bort.services import bots
from bort.services import calibration
from bort.services import printing
from bort import utils

async def list_bots_endpoint(
    db: database.Database = Depends(utils.get_database)
) -> list[Bot]:
    return database.list_bots(db)

async def create_bot_endpoint(
    request: BotCreateRequest,
    db: database.Database = Depends(utils.get_database),
    settings: Settings = Depends(utils.get_settings)
) -> OkResponse:
    """
    Create a bot. Specs default to the standard 8-laser printer when omitted.
    A starter main.py and README.md are written to the bot storage folder.

    Raises:
        HTTPException: 409 if a bot with this id already exists
    """
    try:
        bots.create_bot(db, request, settings.bot_storage_dir)
    except sqlite3.IntegrityError:
        raise HTTPException(status_code=409, detail=f"Bot {request.id} already exists")
    return OkResponse()

async def update_specs_endpoint(
    bot_id: str,
    request: BotSpecsUpdateRequest,
    db: database.Database = Depends(utils.get_database)
) -> OkResponse:
    """
    Raises:
        HTTPException: 404 if the bot does not exist
    """
    if not database.update_bot_specs(db, bot_id, request.specs):
        raise HTTPException(status_code=404, detail="Bot not found")
    return OkResponse()

async def remove_bot_endpoint(
    bot_id: str,
    db: database.Database = Depends(utils.get_database)
) -> OkResponse:
    database.delete_bot(db, bot_id)
    return OkResponse()

async def calibrate_printer_endpoint(
    bot_id: str,
    db: database.Database = Depends(utils.get_database)
) -> CalibrationResponse | CalibrationNotFoundResponse:
    """
    Calibrate the printer of one bot.

    Args:
        bot_id: Bot identifier
        db: Database connection

    Returns:
        CalibrationResponse with ok=True, or CalibrationNotFoundResponse with
        ok=False when the bot does not exist (still HTTP 200)

    Raises:
        HTTPException: 500 if the stored specs cannot be calibrated
    """
    try:
        return calibration.calibrate_bot(db, bot_id)
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

async def calibrate_array_endpoint(
    db: database.Database = Depends(utils.get_database)
) -> ArrayCalibrationResponse:
    """
    Calibrate every printer in the array at once.

    Returns:
        ArrayCalibrationResponse with per-printer results and all_safe flag

    Raises:
        HTTPException: 500 if any stored specs cannot be calibrated
    """
    try:
        return calibration.calibrate_all_bots(db)
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

async def start_array_print_endpoint(
    request: ArrayPrintRequest,
    db: database.Database = Depends(utils.get_database)
) -> ArrayPrintResponse:
    bot_ids = [bot.id for bot in database.list_bots(db)]
    return printing.start_array_print(bot_ids, permanence_code=request.permanence_code)

async def animation_frame_endpoint(
    request: AnimationFrameRequest
) -> AnimationFrameResponse:
    """
    Advance the printer array animation by one frame.

    Args:
        request: Previous animation state, elapsed seconds and array calibration data

    Returns:
        AnimationFrameResponse with the next state and per-printer arm poses
    """
    state, frames = animation.advance_frame(request.state, request.delta_s, request.calibrations)
    return AnimationFrameResponse(state=state, printers=frames)

def factory(app: fastapi.FastAPI) -> APIRouter:
    """
    Create and configure the bots API router.

    Args:
        app: FastAPI application instance

    Returns:
        Configured APIRouter with bot endpoints:
        - GET /bots/ - List bots
        - POST /bots/ - Create a bot
        - PUT /bots/{bot_id}/specs - Replace bot specs
        - DELETE /bots/{bot_id} - Remove a bot
        - POST /bots/{bot_id}/calibrate - Calibrate one printer
        - POST /bots/calibrate-array - Calibrate all printers
        - POST /bots/print-array - Start printing on all printers
        - POST /bots/animation-frame - Advance the array animation state
    """
    router = APIRouter(prefix="/bots", tags=["bots"])

    router.add_api_route(
        "/",
        list_bots_endpoint,
        methods=["GET"],
        response_model=list[Bot]
    )

    router.add_api_route(
        "/",
        create_bot_endpoint,
        methods=["POST"],
        response_model=OkResponse
    )

    router.add_api_route(
        "/calibrate-array",
        calibrate_array_endpoint,
        methods=["POST"],
        response_model=ArrayCalibrationResponse
    )

    router.add_api_route(
        "/print-array",
        start_array_print_endpoint,
        methods=["POST"],
        response_model=ArrayPrintResponse
    )

    router.add_api_route(
        "/animation-frame",
        animation_frame_endpoint,
        methods=["POST"],
        response_model=AnimationFrameResponse
    )

    router.add_api_route(
        "/{bot_id}/specs",
        update_specs_endpoint,
        methods=["PUT"],
        response_model=OkResponse
    )

    router.add_api_route(
        "/{bot_id}",
        remove_bot_endpoint,
        methods=["DELETE"],
        response_model=OkResponse
    )

    router.add_api_route(
        "/{bot_id}/calibrate",
        calibrate_printer_endpoint,
        methods=["POST"],
        response_model=CalibrationResponse | CalibrationNotFoundResponse
    )

    return router
