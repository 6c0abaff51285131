"""
PRINTER CALIBRATION GEOMETRY

Every printer in the array has 8 downward lasers mounted on articulated arms along
the roof line of its enclosure, above a steel base plate. Calibration derives:

- the plate size in cm (the plate is specified in mm, everything else in cm)
- the free margin left on each side of the plate by the laser footprint
- where each laser sits along the plate width
- the starting rotation of each arm for the 360 degree calibration scan

Displayed margins are clamped at 0, but the safe flag is always computed from the
raw margins. A footprint wider than the plate reports a 0 margin AND safe=False.
"""

import math
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable

from loguru import logger

from bort.modules import database
from bort.schemas.calibration import ArmRotation
from bort.schemas.calibration import ArrayCalibrationResponse
from bort.schemas.calibration import CalibrationNotFoundResponse
from bort.schemas.calibration import CalibrationResponse
from bort.schemas.calibration import CalibrationResult
from bort.schemas.calibration import LaserPosition
from bort.schemas.calibration import MarginsCm
from bort.schemas.calibration import PrinterCalibration
from bort.schemas.specs import PrinterSpecs

MM_PER_CM = 10.0
SHOULDER_PITCH = math.pi / 4
YAW_STEP = math.pi / 4

def mm_to_cm(value_mm: float) -> float:
    return value_mm / MM_PER_CM

def compute_margin(plate_cm: float, footprint_cm: float) -> float:
    """
    Free space on one side of the plate once the footprint is centered on it.
    Negative when the footprint overflows the plate.
    """
    return (plate_cm - footprint_cm) / 2

def laser_positions(plate_w_cm: float, enclosure_h_cm: float, count: int) -> list[LaserPosition]:
    """
    Spread lasers evenly across the plate width, centered on 0, on the roof line.

    Args:
        plate_w_cm: Base plate width in cm
        enclosure_h_cm: Enclosure height in cm, used as the mounting height
        count: Number of downward lasers

    Returns:
        One LaserPosition per laser, from -plate_w_cm/2 to +plate_w_cm/2
    """
    spacing = plate_w_cm / (count - 1)
    return [
        LaserPosition(index=i, x_cm=spacing * i - plate_w_cm / 2, y_cm=enclosure_h_cm, z_cm=0.0)
        for i in range(count)
    ]

def arm_rotations(count: int) -> list[ArmRotation]:
    """
    Starting rotations for the arm scan. Shoulders are staggered by 45 degrees and
    tilted 45 degrees down at the plate; elbow and wrist stay neutral and are
    perturbed by the animation loop at runtime.
    """
    return [
        ArmRotation(
            index=i,
            shoulder_yaw=i * YAW_STEP,
            shoulder_pitch=SHOULDER_PITCH,
            elbow=0.0,
            wrist_yaw=0.0,
            wrist_pitch=0.0,
        )
        for i in range(count)
    ]

def calibrate_printer(specs: PrinterSpecs) -> CalibrationResult:
    """
    Compute calibration geometry for a single printer.

    Args:
        specs: Validated printer specs

    Returns:
        CalibrationResult with safety flag, plate size, clamped margins,
        laser positions and arm rotations
    """
    plate_w_cm = mm_to_cm(specs.base_plate_mm.w)
    plate_d_cm = mm_to_cm(specs.base_plate_mm.d)

    footprint = specs.downward_lasers.footprint_cm
    margin_w = compute_margin(plate_w_cm, footprint.w)
    margin_d = compute_margin(plate_d_cm, footprint.d)
    safe = margin_w >= 0 and margin_d >= 0

    count = specs.downward_lasers.count

    return CalibrationResult(
        safe=safe,
        plate_w_cm=plate_w_cm,
        plate_d_cm=plate_d_cm,
        margins_cm=MarginsCm(w=max(0.0, margin_w), d=max(0.0, margin_d)),
        downward_array=laser_positions(plate_w_cm, specs.enclosure_cm.h, count),
        arm_rotations=arm_rotations(count),
    )

def calibrate_bot(db: database.Database, bot_id: str) -> CalibrationResponse | CalibrationNotFoundResponse:
    """
    Look up a bot and calibrate its printer.

    Args:
        db: Database connection
        bot_id: Bot identifier

    Returns:
        CalibrationResponse, or CalibrationNotFoundResponse if the bot does not exist
    """
    bot = database.get_bot(db, bot_id)
    if bot is None:
        logger.info(f"[CALIBRATION] Bot {bot_id} not found")
        return CalibrationNotFoundResponse(error="Bot not found")

    result = calibrate_printer(bot.specs.printer)
    logger.info(
        f"[CALIBRATION] Bot {bot_id}: safe={result.safe} "
        f"margins=({result.margins_cm.w:.2f}, {result.margins_cm.d:.2f}) cm"
    )
    return CalibrationResponse(**result.model_dump())

def _calibrate_unit(unit: tuple[str, PrinterSpecs]) -> PrinterCalibration:
    bot_id, specs = unit
    return PrinterCalibration(bot_id=bot_id, **calibrate_printer(specs).model_dump())

def calibrate_array(units: Iterable[tuple[str, PrinterSpecs]], max_workers: int | None = None) -> ArrayCalibrationResponse:
    """
    Calibrate every printer in the array independently.

    Args:
        units: (bot_id, specs) pairs, in the order results should be reported
        max_workers: Run the per-printer calibrations on a thread pool of this size.
            Sequential when None or 1.

    Returns:
        ArrayCalibrationResponse with per-printer results and an all_safe flag
    """
    units = list(units)
    if max_workers is not None and max_workers > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            printers = list(executor.map(_calibrate_unit, units))
    else:
        printers = [_calibrate_unit(unit) for unit in units]

    all_safe = all(p.safe for p in printers)
    logger.info(f"[CALIBRATION] Array calibrated: {len(printers)} printers, all_safe={all_safe}")

    return ArrayCalibrationResponse(
        printers=printers,
        total_printers=len(printers),
        all_safe=all_safe,
    )

def calibrate_all_bots(db: database.Database, max_workers: int | None = None) -> ArrayCalibrationResponse:
    bots = database.list_bots(db)
    return calibrate_array(((bot.id, bot.specs.printer) for bot in bots), max_workers=max_workers)
