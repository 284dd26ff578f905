from ghxsim.enums import GHEType
from ghxsim.ghe.fields.base import GHEFieldBase
from ghxsim.ghe.fields.slinky import SlinkyField
from ghxsim.ghe.fields.vertical import VerticalBoreholeField


def get_field_object(ghe_type: GHEType, inputs: dict) -> GHEFieldBase:
    match ghe_type:
        case GHEType.VERTICAL:
            return VerticalBoreholeField.init_from_dict(inputs)
        case GHEType.SLINKY:
            return SlinkyField.init_from_dict(inputs)
        case _:
            raise TypeError(f"GHE type {ghe_type} not implemented")
