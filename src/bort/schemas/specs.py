from typing import Literal

import pydantic

class EnclosureCm(pydantic.BaseModel):
    w: float = pydantic.Field(..., gt=0, description="Enclosure width in cm")
    h: float = pydantic.Field(..., gt=0, description="Enclosure height in cm (roof mounting line)")
    d: float = pydantic.Field(..., gt=0, description="Enclosure depth in cm")

class BasePlateMm(pydantic.BaseModel):
    w: float = pydantic.Field(..., gt=0, description="Base plate width in mm")
    d: float = pydantic.Field(..., gt=0, description="Base plate depth in mm")
    h: float = pydantic.Field(..., gt=0, description="Base plate height in mm")

class FootprintCm(pydantic.BaseModel):
    w: float = pydantic.Field(..., gt=0)
    d: float = pydantic.Field(..., gt=0)
    h: float = pydantic.Field(..., gt=0)

class EmitterSizeCm(pydantic.BaseModel):
    w: float = pydantic.Field(..., gt=0)
    h: float = pydantic.Field(..., gt=0)
    d: float = pydantic.Field(..., gt=0)

class DownwardLasers(pydantic.BaseModel):
    count: Literal[8] = 8
    footprint_cm: FootprintCm

class RoofSphere(pydantic.BaseModel):
    grid: tuple[Literal[9], Literal[9], Literal[9]] = (9, 9, 9)
    single_emitter_size_cm: EmitterSizeCm

class PrinterSpecs(pydantic.BaseModel):
    enclosure_cm: EnclosureCm
    base_plate_mm: BasePlateMm
    downward_lasers: DownwardLasers
    roof_sphere: RoofSphere

    model_config = {"frozen": True}

class BotSpecs(pydantic.BaseModel):
    type: str = "generic"
    version: str = "1.0"
    printer: PrinterSpecs

def default_specs() -> BotSpecs:
    """
    Build the specs assigned to a bot created without explicit specs:
    100x120x100 cm enclosure over a 900 mm steel cube with 8 downward lasers.
    """
    return BotSpecs(
        printer=PrinterSpecs(
            enclosure_cm=EnclosureCm(w=100, h=120, d=100),
            base_plate_mm=BasePlateMm(w=900, d=900, h=900),
            downward_lasers=DownwardLasers(count=8, footprint_cm=FootprintCm(w=5, d=5, h=10)),
            roof_sphere=RoofSphere(grid=(9, 9, 9), single_emitter_size_cm=EmitterSizeCm(w=2, h=2, d=2)),
        )
    )
