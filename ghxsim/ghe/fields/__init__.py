from ghxsim.ghe.fields.factory import get_field_object
from ghxsim.ghe.fields.slinky import SlinkyField
from ghxsim.ghe.fields.vertical import VerticalBoreholeField
