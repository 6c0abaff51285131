"""
Frame-by-frame animation state for the printer array viewer.

The viewer holds one ArrayAnimationState and hands it back every frame together
with the elapsed time. advance_frame never mutates its input: it returns the next
state plus the pose of every arm, so rendering stays a pure function of state.
"""

import math

from bort.schemas.calibration import ArmRotation
from bort.schemas.calibration import PrinterCalibration
from bort.schemas.printing import ArmPose
from bort.schemas.printing import ArrayAnimationState
from bort.schemas.printing import PrinterFrame

CALIBRATION_SPEED = 0.2
PRINT_SPEED = 0.5
TOTAL_LAYERS = 100
SCAN_RADIUS_RATIO = 0.4

def rest_pose(rotation: ArmRotation) -> ArmPose:
    return ArmPose(
        index=rotation.index,
        shoulder_yaw=rotation.shoulder_yaw,
        shoulder_pitch=rotation.shoulder_pitch,
        elbow=rotation.elbow,
        wrist_yaw=rotation.wrist_yaw,
        wrist_pitch=rotation.wrist_pitch,
    )

def scan_pose(rotation: ArmRotation, progress: float, scan_radius_cm: float) -> ArmPose:
    """
    Pose of one arm during the 360 degree calibration sweep.

    Args:
        rotation: Starting rotation of the arm from calibration
        progress: Sweep progress in [0, 1)
        scan_radius_cm: Radius of the beam target circle on the plate

    Returns:
        ArmPose with perturbed elbow/wrist angles and the beam target on the plate
    """
    i = rotation.index
    yaw = progress * math.pi * 2 + rotation.shoulder_yaw
    return ArmPose(
        index=i,
        shoulder_yaw=yaw,
        shoulder_pitch=rotation.shoulder_pitch,
        elbow=rotation.elbow + math.sin(progress * 2 + i) * 0.1,
        wrist_pitch=rotation.wrist_pitch + math.cos(progress * 3 + i) * 0.15,
        wrist_yaw=rotation.wrist_yaw + math.sin(progress * 2.5 + i) * 0.2,
        beam_target_x_cm=math.cos(yaw) * scan_radius_cm,
        beam_target_z_cm=math.sin(yaw) * scan_radius_cm,
    )

def advance_calibration(progress: float, delta_s: float) -> float:
    progress += delta_s * CALIBRATION_SPEED
    if progress >= 1:
        progress = 0.0
    return progress

def printer_print_progress(array_progress: float, printer_index: int) -> float:
    # Printers further down the array finish later
    return min(1.0, array_progress / (printer_index + 1))

def printed_layers(progress: float) -> int:
    return math.floor(progress * TOTAL_LAYERS)

def advance_frame(
    state: ArrayAnimationState,
    delta_s: float,
    calibrations: list[PrinterCalibration],
) -> tuple[ArrayAnimationState, list[PrinterFrame]]:
    """
    Advance the array animation by one frame tick.

    Args:
        state: Animation state after the previous frame
        delta_s: Seconds elapsed since the previous frame
        calibrations: Calibration data of every printer in the array

    Returns:
        (next state, one PrinterFrame per calibrated printer)
    """
    if state.mode == "calibrating":
        progress = advance_calibration(state.calibration_progress, delta_s)
        next_state = state.model_copy(update={"calibration_progress": progress})
        frames = [
            PrinterFrame(
                bot_id=cal.bot_id,
                arms=[scan_pose(rot, progress, cal.plate_w_cm * SCAN_RADIUS_RATIO) for rot in cal.arm_rotations],
            )
            for cal in calibrations
        ]
        return next_state, frames

    if state.mode == "printing":
        array_progress = state.print_progress + delta_s * PRINT_SPEED
        next_state = state.model_copy(update={"print_progress": array_progress})
        frames = []
        for k, cal in enumerate(calibrations):
            progress = printer_print_progress(array_progress, k)
            frames.append(PrinterFrame(
                bot_id=cal.bot_id,
                arms=[rest_pose(rot) for rot in cal.arm_rotations],
                print_progress=progress,
                printed_layers=printed_layers(progress),
            ))
        return next_state, frames

    frames = [
        PrinterFrame(bot_id=cal.bot_id, arms=[rest_pose(rot) for rot in cal.arm_rotations])
        for cal in calibrations
    ]
    return state.model_copy(), frames
