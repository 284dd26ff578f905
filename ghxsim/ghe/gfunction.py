import logging
from math import log

import numpy as np
import pygfunction as gt
from pygfunction.gfunction import gFunction

from ghxsim.errors import ConfigurationError
from ghxsim.utilities import eskilson_log_times

logger = logging.getLogger(__name__)


class ResponseFunctionTable:
    """
    Ordered (lntts, g) pairs describing a field's step response.

    Lookups inside the range are linear interpolations between the bracketing pair, found by
    binary search. Queries at or below the first point, or above the last, are extrapolated
    linearly from the two end points on that side.
    """

    def __init__(self, lntts, g_values) -> None:
        lntts = np.array(lntts, dtype=float)
        g_values = np.array(g_values, dtype=float)

        if lntts.ndim != 1 or lntts.shape != g_values.shape:
            raise ConfigurationError("Response table needs matching one-dimensional lntts and g sequences")
        if lntts.size < 2:
            raise ConfigurationError(f"Response table needs at least 2 pairs, got {lntts.size}")
        if np.any(np.diff(lntts) <= 0.0):
            raise ConfigurationError("Response table lntts values must be strictly increasing")

        lntts.flags.writeable = False
        g_values.flags.writeable = False
        self._lntts = lntts
        self._g = g_values

    @classmethod
    def from_pairs(cls, pairs) -> "ResponseFunctionTable":
        """Build from a flat ordered list of (lntts, g) pairs."""
        pairs = list(pairs)
        return cls([p[0] for p in pairs], [p[1] for p in pairs])

    @classmethod
    def init_from_dict(cls, inputs: dict) -> "ResponseFunctionTable":
        return cls(inputs["lntts"], inputs["g"])

    @property
    def lntts(self) -> np.ndarray:
        return self._lntts

    @property
    def g(self) -> np.ndarray:
        return self._g

    @property
    def min_lntts(self) -> float:
        return float(self._lntts[0])

    @property
    def max_lntts(self) -> float:
        return float(self._lntts[-1])

    def __len__(self) -> int:
        return self._lntts.size

    def interpolate(self, x: float) -> float:
        xs = self._lntts
        gs = self._g

        if x <= xs[0]:
            lo, hi = 0, 1
        elif x > xs[-1]:
            lo, hi = -2, -1
        else:
            # first index with xs[idx] >= x
            idx = int(np.searchsorted(xs, x, side="left"))
            if xs[idx] == x:
                return float(gs[idx])
            lo, hi = idx - 1, idx

        slope = (gs[hi] - gs[lo]) / (xs[hi] - xs[lo])
        return float(gs[lo] + slope * (x - xs[lo]))

    def as_dict(self) -> dict:
        return {"lntts": self._lntts.tolist(), "g": self._g.tolist()}


def borehole_radius_correction(g: float, rb: float, rb_star: float) -> float:
    r"""
    Correct the borehole radius. From paper 3 of Eskilson 1987.

    .. math::
        g(\dfrac{t}{t_s}, \dfrac{r_b^*}{H}) =
        g(\dfrac{t}{t_s}, \dfrac{r_b}{H}) - ln(\dfrac{r_b^*}{r_b})

    :param g: g-function value at the table's radius
    :param rb: the borehole radius the table was generated for
    :param rb_star: the borehole radius that is being corrected to
    :return: the corrected g-function value
    """
    return g - log(rb_star / rb)


def calc_vertical_g_function(
    rows: int,
    columns: int,
    spacing: float,
    length: float,
    buried_depth: float,
    radius: float,
    alpha: float,
    log_time: list[float] | None = None,
) -> ResponseFunctionTable:
    """
    Generate a vertical field response table with pygfunction.

    A rectangular field under a uniform borehole wall temperature is evaluated at the given
    dimensionless log-times (Eskilson's 27 points by default).
    """
    if log_time is None:
        log_time = eskilson_log_times()

    # hardcoding these until there is a need to expose them
    n_segments = 8
    end_length_ratio = 0.02
    options = {
        "nSegments": n_segments,
        "segment_ratios": gt.utilities.segment_ratios(nSegments=n_segments, end_length_ratio=end_length_ratio),
        "disp": False,
    }

    field = gt.boreholes.rectangle_field(
        N_1=columns, N_2=rows, B_1=spacing, B_2=spacing, H=length, D=buried_depth, r_b=radius
    )

    ts = length**2 / (9.0 * alpha)  # Bore field characteristic time
    time_values = np.exp(log_time) * ts

    logger.info(f"Computing g-function for a {rows} x {columns} field with pygfunction")
    g_func = gFunction(field, alpha, time=time_values, method="equivalent", boundary_condition="UBWT", options=options)

    return ResponseFunctionTable(log_time, g_func.gFunc)
