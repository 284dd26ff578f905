from . import (
    constants,
    enums,
    errors,
    ghe,
    media,
    output,
    simulation,
    utilities,
    validate,
)
from .constants import VERSION
from .ghe.manager import GHEManager
