from enum import Enum, auto


class GHEType(Enum):
    VERTICAL = "VERTICAL"
    SLINKY = "SLINKY"


class SlinkyConfigType(Enum):
    VERTICAL = "VERTICAL"
    HORIZONTAL = "HORIZONTAL"


class FieldRegion(Enum):
    NEAR = auto()
    MID = auto()
    FAR = auto()


class SimState(Enum):
    RESET = auto()
    COLD = auto()
    FIRST_STEP = auto()
    SHORT_HISTORY = auto()
    AGGREGATED_HISTORY = auto()


class FluidType(Enum):
    ETHYLALCOHOL = auto()
    ETHYLENEGLYCOL = auto()
    METHYLALCOHOL = auto()
    PROPYLENEGLYCOL = auto()
    WATER = auto()
