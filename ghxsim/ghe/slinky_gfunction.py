import logging
from math import ceil, log10, pi, sqrt

import numpy as np
from scipy.integrate import simpson
from scipy.special import erfc

from ghxsim.constants import (
    FOUR_PI_SQUARED,
    LN_10,
    MID_FIELD_OFFSET,
    NEAR_FIELD_OFFSET,
    SEC_IN_HR,
    SEC_IN_YEAR,
    SLINKY_INNER_POINTS,
    SLINKY_INNER_POINTS_SELF,
    SLINKY_LOG_TIME_START,
    SLINKY_LOG_TIME_STEP,
    SLINKY_OUTER_POINTS,
    TWO_PI,
)
from ghxsim.enums import FieldRegion, SlinkyConfigType
from ghxsim.errors import ConfigurationError
from ghxsim.ghe.gfunction import ResponseFunctionTable

logger = logging.getLogger(__name__)


def check_simpson_points(num_points: int) -> None:
    if num_points < 3 or num_points % 2 == 0:
        raise ConfigurationError(f"Simpson's rule needs an odd number of points >= 3, got {num_points}")


def simpson_ring_integral(values: np.ndarray) -> np.ndarray | float:
    """
    Composite Simpson's rule over one full turn, [0, 2*pi], along the last axis.

    :param values: integrand sampled at equally spaced angles, both end points included
    :return: the integral, with the last axis removed
    """
    values = np.asarray(values, dtype=float)
    num_points = values.shape[-1]
    check_simpson_points(num_points)
    return simpson(values, dx=TWO_PI / (num_points - 1), axis=-1)


class SlinkyGFunctionGenerator:
    """
    Response table for a field of slinky coils, treated as rings of point sources.

    Rings sit on a grid of ``num_coils`` along each trench by ``num_trenches`` trenches. Each
    (sink, source) ring pair contributes according to its centre distance: a double
    integral over both rings when near, a closed-form ring approximation at mid range and
    nothing when far. Pair values depend only on the (trench, coil) index offset, so they are
    evaluated once per offset and weighted by how often the offset occurs over the sources.

    Reference: Xiong, Z., D.E. Fisher and J.D. Spitler. 2015. 'Development and Validation of a
    Slinky Ground Heat Exchanger Model.' Applied Energy 141: 57-69.
    """

    def __init__(
        self,
        coil_diameter: float,
        coil_pitch: float,
        coil_depth: float,
        pipe_outer_diameter: float,
        num_trenches: int,
        num_coils: int,
        trench_spacing: float,
        alpha: float,
        max_sim_years: int,
        config: SlinkyConfigType = SlinkyConfigType.HORIZONTAL,
        outer_points: int = SLINKY_OUTER_POINTS,
        inner_points_self: int = SLINKY_INNER_POINTS_SELF,
        inner_points: int = SLINKY_INNER_POINTS,
    ) -> None:
        for n_points in (outer_points, inner_points_self, inner_points):
            check_simpson_points(n_points)
        if num_trenches < 1 or num_coils < 1:
            raise ConfigurationError(
                f"Slinky field needs at least one trench and one coil, got {num_trenches} x {num_coils}"
            )

        self.coil_radius = coil_diameter / 2.0
        self.coil_diameter = coil_diameter
        self.coil_pitch = coil_pitch
        self.coil_depth = coil_depth
        self.r_pipe = pipe_outer_diameter / 2.0
        self.num_trenches = num_trenches
        self.num_coils = num_coils
        self.trench_spacing = trench_spacing
        self.alpha = alpha
        self.max_sim_years = max_sim_years
        self.config = config
        self.outer_points = outer_points
        self.inner_points_self = inner_points_self
        self.inner_points = inner_points

        # number of source rings evaluated along each axis
        self.num_ring_trenches = ceil(num_trenches / 2.0)
        self.num_ring_coils = ceil(num_coils / 2.0)

    # Geometry
    # --------
    def distance_to_center(self, d_trench: int, d_coil: int) -> float:
        return sqrt((self.coil_pitch * d_coil) ** 2 + (self.trench_spacing * d_trench) ** 2)

    def classify(self, center_distance: float) -> FieldRegion:
        if center_distance <= NEAR_FIELD_OFFSET + self.coil_diameter:
            return FieldRegion.NEAR
        if center_distance > MID_FIELD_OFFSET + self.coil_diameter:
            return FieldRegion.FAR
        return FieldRegion.MID

    def _ring_points(self, d_trench: int, d_coil: int, eta, theta):
        # sink point on the ring centreline, and the source ring's inner and outer pipe walls
        r_in = self.coil_radius - self.r_pipe
        r_out = self.coil_radius + self.r_pipe
        dy = self.trench_spacing * d_trench

        x = self.coil_pitch * d_coil + np.cos(theta) * self.coil_radius
        x_in = np.cos(eta) * r_in
        x_out = np.cos(eta) * r_out
        if self.config == SlinkyConfigType.HORIZONTAL:
            # horizontal rings share the burial plane
            y = dy + np.sin(theta) * self.coil_radius
            return (x - x_in, y - np.sin(eta) * r_in), (x - x_out, y - np.sin(eta) * r_out)

        # vertical rings stand in the trench plane, z measured down from the ring centre depth
        z = np.sin(theta) * self.coil_radius
        return (x - x_in, dy, z - np.sin(eta) * r_in), (x - x_out, dy, z - np.sin(eta) * r_out)

    @staticmethod
    def _mean_wall_distance(inner, outer):
        return 0.5 * np.sqrt(sum(c**2 for c in inner)) + 0.5 * np.sqrt(sum(c**2 for c in outer))

    def distance(self, d_trench: int, d_coil: int, eta, theta):
        return self._mean_wall_distance(*self._ring_points(d_trench, d_coil, eta, theta))

    def distance_to_fict_ring(self, d_trench: int, d_coil: int, eta, theta):
        """Distance to the sink's image above the ground surface. Vertical coils only."""
        (dx_in, dy, dz_in), (dx_out, _, dz_out) = self._ring_points(d_trench, d_coil, eta, theta)
        shift = 2.0 * self.coil_depth
        return self._mean_wall_distance((dx_in, dy, dz_in + shift), (dx_out, dy, dz_out + shift))

    # Responses
    # ---------
    def near_field_response(self, d_trench: int, d_coil: int, eta, theta, t: float):
        sqrt_alpha_t = sqrt(self.alpha * t)
        distance_1 = self.distance(d_trench, d_coil, eta, theta)
        if self.config == SlinkyConfigType.HORIZONTAL:
            distance_2 = np.sqrt(distance_1**2 + 4.0 * self.coil_depth**2)
        else:
            distance_2 = self.distance_to_fict_ring(d_trench, d_coil, eta, theta)
        return erfc(0.5 * distance_1 / sqrt_alpha_t) / distance_1 - erfc(0.5 * distance_2 / sqrt_alpha_t) / distance_2

    def mid_field_response(self, d_trench: int, d_coil: int, t: float) -> float:
        sqrt_alpha_t = sqrt(self.alpha * t)
        distance = self.distance_to_center(d_trench, d_coil)
        sqrt_dist_depth = sqrt(distance**2 + 4.0 * self.coil_depth**2)
        err_func_1 = erfc(0.5 * distance / sqrt_alpha_t)
        err_func_2 = erfc(0.5 * sqrt_dist_depth / sqrt_alpha_t)
        return float(FOUR_PI_SQUARED * (err_func_1 / distance - err_func_2 / sqrt_dist_depth))

    def double_integral(self, d_trench: int, d_coil: int, t: float, outer_points: int, inner_points: int) -> float:
        eta = np.linspace(0.0, TWO_PI, outer_points)[:, np.newaxis]
        theta = np.linspace(0.0, TWO_PI, inner_points)[np.newaxis, :]
        f = self.near_field_response(d_trench, d_coil, eta, theta, t)
        return float(simpson_ring_integral(simpson_ring_integral(f)))

    def pair_response(self, d_trench: int, d_coil: int, t: float) -> float:
        match self.classify(self.distance_to_center(d_trench, d_coil)):
            case FieldRegion.NEAR:
                if d_trench == 0 and d_coil == 0:
                    n_inner = self.inner_points_self
                else:
                    n_inner = self.inner_points
                return self.double_integral(d_trench, d_coil, t, self.outer_points, n_inner)
            case FieldRegion.MID:
                return self.mid_field_response(d_trench, d_coil, t)
            case _:
                return 0.0

    # Superposition over the field
    # ----------------------------
    def symmetry_weight(self, trench: int, coil: int) -> float:
        """Weight of a source ring in the evaluated quadrant, 1-based indices."""
        odd_trenches = self.num_trenches % 2 == 1
        odd_coils = self.num_coils % 2 == 1
        on_trench_axis = odd_trenches and trench == self.num_ring_trenches and self.num_trenches > 1
        on_coil_axis = odd_coils and coil == self.num_ring_coils

        if on_trench_axis and on_coil_axis:
            return 0.25
        if on_trench_axis or on_coil_axis:
            return 0.5
        return 1.0

    def offset_weights(self, use_symmetry: bool = True) -> tuple[np.ndarray, float]:
        """
        Total source weight for every (trench, coil) offset, plus the field fraction covered.

        With symmetry only one quadrant of sources is visited and weighted; without it every
        ring in the field is a source with weight 1.
        """
        weights = np.zeros((self.num_trenches, self.num_coils))
        trench_idx = np.arange(1, self.num_trenches + 1)
        coil_idx = np.arange(1, self.num_coils + 1)

        if use_symmetry:
            sources = [
                (m1, n1, self.symmetry_weight(m1, n1))
                for m1 in range(1, self.num_ring_trenches + 1)
                for n1 in range(1, self.num_ring_coils + 1)
            ]
            fraction = 0.25 if self.num_trenches > 1 else 0.5
        else:
            sources = [(m1, n1, 1.0) for m1 in trench_idx for n1 in coil_idx]
            fraction = 1.0

        for m1, n1, w in sources:
            np.add.at(weights, np.ix_(np.abs(trench_idx - m1), np.abs(coil_idx - n1)), w)

        return weights, fraction

    def g_value(self, t: float, use_symmetry: bool = True) -> float:
        """
        :param t: time (s)
        :param use_symmetry: evaluate one quadrant of source rings only
        :return: g-function value
        """
        weights, fraction = self.offset_weights(use_symmetry)
        g_sum = 0.0
        for d_trench, d_coil in zip(*np.nonzero(weights)):
            g_sum += weights[d_trench, d_coil] * self.pair_response(int(d_trench), int(d_coil), t)
        return g_sum * self.coil_radius / (4.0 * pi * fraction * self.num_trenches * self.num_coils)

    def log_time_grid(self) -> np.ndarray:
        """Grid of log10(t / 1 hr) points covering the simulation horizon."""
        tlg_max = log10(self.max_sim_years * SEC_IN_YEAR / SEC_IN_HR)
        n_pairs = int((tlg_max - SLINKY_LOG_TIME_START) / SLINKY_LOG_TIME_STEP) + 1
        return SLINKY_LOG_TIME_START + SLINKY_LOG_TIME_STEP * np.arange(n_pairs)

    def generate(self) -> ResponseFunctionTable:
        tlg = self.log_time_grid()
        logger.info(
            f"Generating slinky g-function at {tlg.size} points for {self.num_trenches} x {self.num_coils} rings"
        )
        g = [self.g_value(10.0**x * SEC_IN_HR) for x in tlg]
        # stored against ln(t / 1 hr)
        return ResponseFunctionTable(tlg * LN_10, g)
