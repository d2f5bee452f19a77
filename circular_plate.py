#!/usr/bin/env python3
"""
Circular Plate Field

Modal superposition for a disc of radius R driven at a point:
    psi(r, theta) = 1/(pi R^2) * sum_{m,n} J_m(k_mn r') cos(m theta') * J_m(k_mn r) cos(m theta)
                    / [(k^2 - k_mn^2) + 2i*gamma*k]
where k_mn R is the n-th zero of J'_m (free edge) or J_m (clamped edge) and
gamma = damping_coefficient / R.

Classes:
    CircularPlate: ModalField for disc and annular plates (the hole of a ring
                   only restricts where grains may go).
"""

import logging
from typing import Optional, Tuple, Union

import numpy as np
from scipy.special import jv, jn_zeros, jnp_zeros

from chladni_constants import (
    DEFAULT_OUTER_RADIUS, DAMPING_COEFFICIENT, FREQUENCY_DEFAULT,
    CIRCULAR_MAX_M, CIRCULAR_MAX_N, SOURCE_THRESHOLD_SQUARED,
)
from modal_field import ModalField, ModeCache
from plate_material import DEFAULT_MATERIAL, Material

logger = logging.getLogger(__name__)

BOUNDARY_CONDITIONS = ("free", "clamped")


def bessel_zeros(max_m: int, max_n: int, boundary_condition: str = "free") -> np.ndarray:
    """
    Table of k_mn * R values, shape (max_m + 1, max_n).

    Args:
        max_m (int): Highest angular order.
        max_n (int): Number of radial zeros per order.
        boundary_condition (str): "free" uses zeros of J'_m, "clamped" zeros of J_m.
    """
    if boundary_condition not in BOUNDARY_CONDITIONS:
        raise ValueError(f"Unknown boundary condition '{boundary_condition}'")
    zeros = jnp_zeros if boundary_condition == "free" else jn_zeros
    return np.array([zeros(m, max_n) for m in range(max_m + 1)])


class CircularPlate(ModalField):
    """
    Bessel-mode field of a circular plate.

    Args:
        outer_radius (float): Plate radius R (m).
        material: Material or material name.
        excitation (tuple): Drive point, plate-centred (m).
        frequency (float): Drive frequency (Hz).
        damping_coefficient (float): D in gamma = D / R.
        boundary_condition (str): "free" (default) or "clamped".
    """

    def __init__(
        self,
        outer_radius: float = DEFAULT_OUTER_RADIUS,
        material: Union[str, Material] = DEFAULT_MATERIAL,
        excitation: Tuple[float, float] = (0.0, 0.0),
        frequency: float = FREQUENCY_DEFAULT,
        damping_coefficient: float = DAMPING_COEFFICIENT,
        boundary_condition: str = "free",
        max_m: int = CIRCULAR_MAX_M,
        max_n: int = CIRCULAR_MAX_N
    ):
        assert outer_radius > 0, f"plate radius must be positive, got {outer_radius}"
        self.radius = float(outer_radius)
        self.boundary_condition = boundary_condition
        zeros = bessel_zeros(max_m, max_n, boundary_condition)
        # flattened (m, zero) pairs, one entry per mode
        self.orders = np.repeat(np.arange(max_m + 1), max_n).astype(float)
        self.zeros = zeros.ravel()
        self.mode_cache = ModeCache(self.zeros.size)
        super().__init__(material, excitation, frequency, damping_coefficient)

    def set_radius(self, outer_radius: float) -> None:
        assert outer_radius > 0, f"plate radius must be positive, got {outer_radius}"
        if outer_radius != self.radius:
            self.radius = float(outer_radius)
            self.invalidate()

    @property
    def width(self) -> float:
        return 2 * self.radius

    @property
    def height(self) -> float:
        return 2 * self.radius

    def damping(self) -> float:
        return self.damping_coefficient / self.radius if self.radius > 0 else 0.0

    def normalization(self) -> float:
        return 1.0 / (np.pi * self.radius ** 2) if self.radius > 0 else 0.0

    def invalidate(self) -> None:
        self.mode_cache.invalidate()

    def _source_amplitudes(self) -> np.ndarray:
        x0, y0 = self.excitation
        r0 = np.hypot(x0, y0) / self.radius
        theta0 = np.arctan2(y0, x0)
        return jv(self.orders, self.zeros * r0) * np.cos(self.orders * theta0)

    def _fill_mode_cache(self, k: float, cache: ModeCache) -> None:
        source = self._source_amplitudes()
        active = source * source >= SOURCE_THRESHOLD_SQUARED
        kmn = self.zeros / self.radius
        real_part = k * k - kmn * kmn
        imag_part = 2 * self.damping() * k
        denom = real_part * real_part + imag_part * imag_part
        with np.errstate(divide="ignore", invalid="ignore"):
            np.divide(source * real_part, denom, out=cache.real)
            np.divide(source * imag_part, denom, out=cache.imag)
        active &= denom > 0
        cache.real[~active] = 0.0
        cache.imag[~active] = 0.0
        cache.mode_count = int(active.sum())

    def displacement(self, x, y, wave_number: Optional[float] = None):
        k = self.current_wave_number if wave_number is None else float(wave_number)
        self.mode_cache.recompute_if_stale(k, self._fill_mode_cache)

        x, y = np.broadcast_arrays(np.asarray(x, dtype=float), np.asarray(y, dtype=float))
        r = np.hypot(x, y)
        theta = np.arctan2(y, x)
        field = (jv(self.orders, np.multiply.outer(r / self.radius, self.zeros))
                 * np.cos(np.multiply.outer(theta, self.orders)))
        sum_real = field @ self.mode_cache.real
        sum_imag = field @ self.mode_cache.imag
        psi = self.normalization() * np.hypot(sum_real, sum_imag)
        psi = np.where(r <= self.radius, psi, 0.0)
        return float(psi) if psi.ndim == 0 else psi

    def strength(self, freq):
        """Sum over modes of multiplicity * |source|^2 / [(k^2 - k_mn^2)^2 + 4(gamma k)^2] / (pi R^2)."""
        freq = np.asarray(freq, dtype=float)
        assert np.all(freq > 0), "drive frequency must be positive"
        k2 = np.asarray(self.wave_number(freq) ** 2).reshape(-1, 1)

        source2 = self._source_amplitudes() ** 2
        active = source2 >= SOURCE_THRESHOLD_SQUARED
        multiplicity = np.where(self.orders == 0, 1.0, 2.0)[active]
        kmn2 = (self.zeros[active] / self.radius) ** 2

        diff = k2 - kmn2
        denom = diff * diff + 4 * self.damping() ** 2 * k2
        with np.errstate(divide="ignore", invalid="ignore"):
            terms = np.where(denom > 0, multiplicity * source2[active] / denom, 0.0)
        total = (terms.sum(axis=-1) * self.normalization()).reshape(freq.shape)
        return float(total) if total.ndim == 0 else total
