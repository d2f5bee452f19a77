#!/usr/bin/env python3
import logging
import numpy as np
from typing import Optional, Tuple, Union

from chladni_constants import (
    DEFAULT_PLATE_WIDTH, DEFAULT_PLATE_HEIGHT, DAMPING_COEFFICIENT, FREQUENCY_DEFAULT,
    MAX_MODE, MODE_STEP, SOURCE_THRESHOLD_SQUARED, NORMALIZATION_NUMERATOR,
)
from modal_field import ModalField, ModeCache
from plate_material import DEFAULT_MATERIAL, Material
from plate_shapes import BoundaryShape

logger = logging.getLogger(__name__)


class ChladniPlate(ModalField):
    """
    /**
     * Modal-superposition field of a rectangular plate driven at a point.
     *
     * psi(x,y) = (4/ab) * sum_{(m,n) != (0,0)}
     *            cos(m*pi*x0/a)cos(n*pi*y0/b) * cos(m*pi*x/a)cos(n*pi*y/b)
     *            / [(k^2 - k_mn^2) + 2i*gamma*k]
     *
     * with k = sqrt(f/C), k_mn = pi*sqrt((m/a)^2 + (n/b)^2) and
     * gamma = damping_coefficient / sqrt(ab). Inputs are plate-centred.
     */
    """

    def __init__(
        self,
        a: float = DEFAULT_PLATE_WIDTH,
        b: float = DEFAULT_PLATE_HEIGHT,
        material: Union[str, Material] = DEFAULT_MATERIAL,
        excitation: Tuple[float, float] = (0.0, 0.0),
        frequency: float = FREQUENCY_DEFAULT,
        damping_coefficient: float = DAMPING_COEFFICIENT,
        max_mode: int = MAX_MODE,
        mode_step: int = MODE_STEP,
        boundary: Optional[BoundaryShape] = None
    ) -> None:
        """
        /**
         * @param a                    Plate width (m).
         * @param b                    Plate height (m).
         * @param material             Material or material name (sets C).
         * @param excitation           Drive point (x0, y0), plate-centred (m).
         * @param frequency            Drive frequency (Hz).
         * @param damping_coefficient  D in gamma = D / sqrt(ab).
         * @param max_mode             Highest modal index M for m and n.
         * @param mode_step            Stride of the modal indices.
         * @param boundary             Optional mask; psi is 0 outside it.
         */
        """
        assert a > 0 and b > 0, f"plate dimensions must be positive, got {a} x {b}"
        assert max_mode >= 1 and mode_step >= 1
        self.a: float = float(a)
        self.b: float = float(b)
        self.boundary = boundary
        self.max_mode = max_mode
        self.mode_step = mode_step
        self.mode_indices = np.arange(0, max_mode + 1, mode_step)

        size = self.mode_indices.size
        self.mode_cache = ModeCache((size, size))
        self.m_wavenumbers = np.zeros(size)   # m*pi/a
        self.n_wavenumbers = np.zeros(size)   # n*pi/b
        super().__init__(material, excitation, frequency, damping_coefficient)

    # — plate dimensions —
    @property
    def width(self) -> float:
        return self.a

    @property
    def height(self) -> float:
        return self.b

    def set_dimensions(self, a: float, b: float) -> None:
        assert a > 0 and b > 0, f"plate dimensions must be positive, got {a} x {b}"
        if (a, b) != (self.a, self.b):
            self.a, self.b = float(a), float(b)
            self.invalidate()

    @property
    def area(self) -> float:
        return self.a * self.b

    def normalization(self) -> float:
        area = self.area
        return NORMALIZATION_NUMERATOR / area if area > 0 else 0.0

    def damping(self) -> float:
        area = self.area
        return self.damping_coefficient / np.sqrt(area) if area > 0 else 0.0

    def invalidate(self) -> None:
        self.mode_cache.invalidate()

    # — modal terms —
    def _source_terms(self) -> np.ndarray:
        """cos(m*pi*x0/a)cos(n*pi*y0/b) for every (m, n), with x0, y0 shifted to [0,a]x[0,b]."""
        x0 = self.excitation[0] + self.a / 2
        y0 = self.excitation[1] + self.b / 2
        src_x = np.cos(self.mode_indices * np.pi * x0 / self.a)
        src_y = np.cos(self.mode_indices * np.pi * y0 / self.b)
        return np.outer(src_x, src_y)

    def _modal_wavenumbers_squared(self) -> np.ndarray:
        kx = self.mode_indices * np.pi / self.a
        ky = self.mode_indices * np.pi / self.b
        return kx[:, None] ** 2 + ky[None, :] ** 2

    def _active_modes(self, weights: np.ndarray) -> np.ndarray:
        """Modes whose squared weight passes the threshold, excluding (0,0)."""
        active = weights >= SOURCE_THRESHOLD_SQUARED
        active[0, 0] = False
        return active

    def _fill_mode_cache(self, k: float, cache: ModeCache) -> None:
        np.multiply(self.mode_indices, np.pi / self.a, out=self.m_wavenumbers)
        np.multiply(self.mode_indices, np.pi / self.b, out=self.n_wavenumbers)

        source = self._source_terms()
        active = self._active_modes(source * source)
        kmn2 = self.m_wavenumbers[:, None] ** 2 + self.n_wavenumbers[None, :] ** 2

        # complex denominator (k^2 - k_mn^2) + 2i*gamma*k
        real_part = k * k - kmn2
        imag_part = 2 * self.damping() * k
        denom = real_part * real_part + imag_part * imag_part
        with np.errstate(divide="ignore", invalid="ignore"):
            np.divide(source * real_part, denom, out=cache.real)
            np.divide(source * imag_part, denom, out=cache.imag)
        cache.real[~active] = 0.0
        cache.imag[~active] = 0.0
        cache.mode_count = int(active.sum())

    # — queries —
    def displacement(self, x, y, wave_number: Optional[float] = None):
        """
        /**
         * |psi(x, y)| at plate-centred coordinates; scalars or arrays.
         *
         * @param wave_number  k to evaluate at (default: k of the drive frequency).
         * @return             float for scalar input, ndarray otherwise.
         */
        """
        k = self.current_wave_number if wave_number is None else float(wave_number)
        self.mode_cache.recompute_if_stale(k, self._fill_mode_cache)

        x, y = np.broadcast_arrays(np.asarray(x, dtype=float), np.asarray(y, dtype=float))
        field_x = np.cos(np.multiply.outer(x + self.a / 2, self.m_wavenumbers))
        field_y = np.cos(np.multiply.outer(y + self.b / 2, self.n_wavenumbers))

        sum_real = np.sum((field_x @ self.mode_cache.real) * field_y, axis=-1)
        sum_imag = np.sum((field_x @ self.mode_cache.imag) * field_y, axis=-1)
        psi = self.normalization() * np.hypot(sum_real, sum_imag)

        if self.boundary is not None:
            psi = np.where(self.boundary.contains(x, y), psi, 0.0)
        return float(psi) if psi.ndim == 0 else psi

    def strength(self, freq):
        """
        /**
         * Resonance strength
         *   I(f) = sum_{m,n} |phi_mn(x0,y0)|^2 / [(k^2 - k_mn^2)^2 + 4(gamma*k)^2]
         * with |phi_mn|^2 = (4/ab) cos^2(m*pi*x0/a) cos^2(n*pi*y0/b).
         *
         * @param freq  Drive frequency in Hz, scalar or array.
         */
        """
        freq = np.asarray(freq, dtype=float)
        assert np.all(freq > 0), "drive frequency must be positive"
        k = self.wave_number(freq)

        source = self._source_terms()
        phi2 = self.normalization() * source * source
        active = self._active_modes(phi2)
        phi2 = phi2[active]
        kmn2 = self._modal_wavenumbers_squared()[active]

        k2 = np.asarray(k * k).reshape(-1, 1)
        four_gamma2_k2 = 4 * self.damping() ** 2 * k2
        diff = k2 - kmn2
        denom = diff * diff + four_gamma2_k2
        with np.errstate(divide="ignore", invalid="ignore"):
            terms = np.where(denom > 0, phi2 / denom, 0.0)
        total = terms.sum(axis=-1).reshape(freq.shape)
        return float(total) if total.ndim == 0 else total

    def compute_field(
        self,
        num_points: int = 200
    ) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        /**
         * Displacement magnitude on a uniform grid covering the plate.
         *
         * @param num_points Grid resolution (points per side).
         * @return X         2D array of x-coordinates (num_points x num_points).
         * @return Y         2D array of y-coordinates.
         * @return Z         |psi| on the grid.
         */
        """
        x = np.linspace(-self.a / 2, self.a / 2, num_points)
        y = np.linspace(-self.b / 2, self.b / 2, num_points)
        X, Y = np.meshgrid(x, y)
        return X, Y, self.displacement(X, Y)


if __name__ == "__main__":
    import matplotlib.pyplot as plt

    # --- User-adjustable parameters ---
    freq       = 1200             # drive frequency in Hz
    x0, y0     = 0.03, 0.05       # driver location, plate-centred (m)
    num_points = 300              # grid resolution
    a, b       = 0.32, 0.32       # plate dimensions (m)

    plate = ChladniPlate(a, b, material="Copper", excitation=(x0, y0), frequency=freq)
    X, Y, Z = plate.compute_field(num_points)

    plt.figure(figsize=(6, 6))
    plt.imshow(Z, origin='lower', extent=(-a/2, a/2, -b/2, b/2), cmap='Blues_r')
    plt.colorbar(label='|psi|')
    plt.title(f"Chladni Displacement at {freq} Hz")
    plt.xlabel("x (m)")
    plt.ylabel("y (m)")
    plt.tight_layout()
    plt.show()
