from ghxsim.ghe.ground_heat_exchangers import GroundHeatExchanger
from ghxsim.ghe.manager import GHEManager
