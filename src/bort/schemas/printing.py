from datetime import datetime
from typing import Literal

import pydantic

from bort.schemas.calibration import PrinterCalibration

class ArrayPrintRequest(pydantic.BaseModel):
    permanence_code: str | None = pydantic.Field(None, description="Code that keeps the print from expiring")

class PrintJob(pydantic.BaseModel):
    bot_id: str
    status: Literal["printing"] = "printing"
    progress: float = 0.0
    permanence_code: str | None = None
    expires_at: datetime | None = None

class ArrayPrintResponse(pydantic.BaseModel):
    ok: bool = True
    print_jobs: list[PrintJob]
    total_printers: int
    has_permanence_code: bool

class ArrayAnimationState(pydantic.BaseModel):
    mode: Literal["idle", "calibrating", "printing"] = "idle"
    calibration_progress: float = pydantic.Field(0.0, ge=0)
    print_progress: float = pydantic.Field(0.0, ge=0)

class ArmPose(pydantic.BaseModel):
    index: int
    shoulder_yaw: float
    shoulder_pitch: float
    elbow: float
    wrist_yaw: float
    wrist_pitch: float
    beam_target_x_cm: float | None = None
    beam_target_z_cm: float | None = None

class PrinterFrame(pydantic.BaseModel):
    bot_id: str
    arms: list[ArmPose]
    print_progress: float = 0.0
    printed_layers: int = 0

class AnimationFrameRequest(pydantic.BaseModel):
    state: ArrayAnimationState = pydantic.Field(default_factory=ArrayAnimationState)
    delta_s: float = pydantic.Field(..., ge=0, description="Seconds elapsed since the previous frame")
    calibrations: list[PrinterCalibration] = pydantic.Field(default_factory=list)

class AnimationFrameResponse(pydantic.BaseModel):
    state: ArrayAnimationState
    printers: list[PrinterFrame]
