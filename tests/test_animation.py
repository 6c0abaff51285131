import math

import pytest

from bort.schemas.calibration import PrinterCalibration
from bort.schemas.printing import ArrayAnimationState
from bort.schemas.specs import PrinterSpecs
from bort.schemas.specs import default_specs
from bort.services import animation
from bort.services import calibration

@pytest.fixture
def calibrations():
    result = calibration.calibrate_array([(f"p{i}", default_specs().printer) for i in range(3)])
    return result.printers

def test_calibration_sweep_advances_and_wraps(calibrations):
    """
    Test that the calibration sweep advances with elapsed time and wraps around.
    """
    state = ArrayAnimationState(mode="calibrating")

    state, _ = animation.advance_frame(state, 2.0, calibrations)
    assert state.calibration_progress == pytest.approx(0.4)

    state, _ = animation.advance_frame(state, 3.0, calibrations)
    assert state.calibration_progress == 0.0

def test_advance_frame_does_not_mutate_input(calibrations):
    """
    Test that advancing a frame leaves the given state untouched.
    """
    state = ArrayAnimationState(mode="calibrating", calibration_progress=0.1)

    next_state, _ = animation.advance_frame(state, 1.0, calibrations)

    assert state.calibration_progress == 0.1
    assert next_state.calibration_progress == pytest.approx(0.3)

def test_calibration_sweep_arm_pose(calibrations):
    """
    Test that arm poses follow the calibration sweep.
    """
    state = ArrayAnimationState(mode="calibrating", calibration_progress=0.0)

    _, frames = animation.advance_frame(state, 1.25, calibrations)
    progress = 0.25
    arm = frames[0].arms[2]
    expected_yaw = progress * 2 * math.pi + math.pi / 2

    assert [f.bot_id for f in frames] == ["p0", "p1", "p2"]
    assert arm.shoulder_yaw == pytest.approx(expected_yaw)
    assert arm.shoulder_pitch == pytest.approx(math.pi / 4)
    assert arm.elbow == pytest.approx(math.sin(progress * 2 + 2) * 0.1)
    assert arm.wrist_pitch == pytest.approx(math.cos(progress * 3 + 2) * 0.15)
    assert arm.wrist_yaw == pytest.approx(math.sin(progress * 2.5 + 2) * 0.2)
    assert arm.beam_target_x_cm == pytest.approx(math.cos(expected_yaw) * 36)
    assert arm.beam_target_z_cm == pytest.approx(math.sin(expected_yaw) * 36)

def test_printing_progress_staggers_printers(calibrations):
    """
    Test that printers in an array print with staggered progress.
    """
    state = ArrayAnimationState(mode="printing", print_progress=0.5)

    state, frames = animation.advance_frame(state, 1.0, calibrations)

    assert state.print_progress == pytest.approx(1.0)
    assert [f.print_progress for f in frames] == pytest.approx([1.0, 0.5, 1 / 3])
    assert [f.printed_layers for f in frames] == [100, 50, 33]

def test_printing_progress_caps_at_done(calibrations):
    """
    Test that print progress stops at completion.
    """
    state = ArrayAnimationState(mode="printing", print_progress=10.0)

    _, frames = animation.advance_frame(state, 0.1, calibrations)

    assert all(f.print_progress == 1.0 for f in frames)
    assert all(f.printed_layers == animation.TOTAL_LAYERS for f in frames)

def test_idle_keeps_state_and_rest_pose(calibrations):
    """
    Test that an idle array keeps its state and holds the rest pose.
    """
    state = ArrayAnimationState(mode="idle", calibration_progress=0.3)

    next_state, frames = animation.advance_frame(state, 5.0, calibrations)

    assert next_state == state
    arm = frames[1].arms[3]
    assert arm.shoulder_yaw == pytest.approx(3 * math.pi / 4)
    assert arm.beam_target_x_cm is None

def test_frames_follow_each_printers_plate():
    """
    Test that each printer's frame is sized to its own plate.
    """
    small = default_specs().printer.model_dump()
    small["base_plate_mm"]["w"] = 500
    cal = PrinterCalibration(
        bot_id="small",
        **calibration.calibrate_printer(PrinterSpecs.model_validate(small)).model_dump()
    )
    state = ArrayAnimationState(mode="calibrating")

    _, frames = animation.advance_frame(state, 0.0, [cal])

    arm = frames[0].arms[0]
    assert math.hypot(arm.beam_target_x_cm, arm.beam_target_z_cm) == pytest.approx(20)
