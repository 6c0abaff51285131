from typing import Literal

import pydantic

class LaserPosition(pydantic.BaseModel):
    index: int
    x_cm: float
    y_cm: float
    z_cm: float

class ArmRotation(pydantic.BaseModel):
    index: int
    shoulder_yaw: float
    shoulder_pitch: float
    elbow: float = 0.0
    wrist_yaw: float = 0.0
    wrist_pitch: float = 0.0

class MarginsCm(pydantic.BaseModel):
    w: float
    d: float

class CalibrationResult(pydantic.BaseModel):
    safe: bool
    plate_w_cm: float
    plate_d_cm: float
    margins_cm: MarginsCm
    downward_array: list[LaserPosition]
    arm_rotations: list[ArmRotation]

class CalibrationResponse(CalibrationResult):
    ok: Literal[True] = True

class CalibrationNotFoundResponse(pydantic.BaseModel):
    ok: Literal[False] = False
    error: str

class PrinterCalibration(CalibrationResponse):
    bot_id: str

class ArrayCalibrationResponse(pydantic.BaseModel):
    ok: bool = True
    printers: list[PrinterCalibration]
    total_printers: int
    all_safe: bool
