#!/usr/bin/env python3
"""
Modal Field Base

Shared pieces of the plate field solvers: the memoize-on-key-change mode
coefficient buffer and the interface every modal field implements.

The displacement at a point is a sum over vibration modes of
    source_term(mode) * field_term(mode, x, y) / [(k^2 - k_mode^2) + 2i*gamma*k].
Only the resonance weights source_term / denominator depend on the drive
frequency, and they do not depend on the query point, so they are computed
once per wave number and reused for every grain until the next change.
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable, Optional, Tuple, Union

import numpy as np

from chladni_constants import FREQUENCY_DEFAULT, DAMPING_COEFFICIENT
from plate_material import DEFAULT_MATERIAL, Material, get_material

logger = logging.getLogger(__name__)


class ModeCache:
    """
    Frequency-dependent mode coefficients for the last wave number used.

    The arrays are allocated once and overwritten in place by the fill
    callback passed to recompute_if_stale().

    Attributes:
        cached_key (float | None): Wave number the coefficients belong to, None when stale.
        real (np.ndarray): Real resonance weights, zero for skipped modes.
        imag (np.ndarray): Imaginary resonance weights, zero for skipped modes.
        mode_count (int): Number of surviving (non-skipped) modes.
        recompute_count (int): How many times the buffer has been refilled.
    """

    def __init__(self, shape: Union[int, Tuple[int, ...]]):
        self.cached_key: Optional[float] = None
        self.real = np.zeros(shape)
        self.imag = np.zeros(shape)
        self.mode_count: int = 0
        self.recompute_count: int = 0

    def invalidate(self) -> None:
        self.cached_key = None

    def is_stale(self, key: float) -> bool:
        return self.cached_key is None or key != self.cached_key

    def recompute_if_stale(self, key: float, fill: Callable[[float, "ModeCache"], None]) -> bool:
        """
        Refill the buffer through `fill(key, cache)` unless it already holds `key`.

        Returns:
            bool: True when the coefficients were recomputed.
        """
        if not self.is_stale(key):
            return False
        fill(key, self)
        self.cached_key = key
        self.recompute_count += 1
        logger.debug("mode cache refilled for k=%.6g (%d modes)", key, self.mode_count)
        return True


class ModalField(ABC):
    """
    Steady-state response of a damped, point-driven plate.

    Holds the drive state shared by all plate geometries: material, drive
    frequency, excitation point and damping coefficient. Changing the
    excitation or damping invalidates the mode cache; changing frequency or
    material only changes the wave number, which the cache keys on.
    """

    def __init__(
        self,
        material: Union[str, Material] = DEFAULT_MATERIAL,
        excitation: Tuple[float, float] = (0.0, 0.0),
        frequency: float = FREQUENCY_DEFAULT,
        damping_coefficient: float = DAMPING_COEFFICIENT
    ):
        self._material = get_material(material)
        self._excitation = (float(excitation[0]), float(excitation[1]))
        self._damping_coefficient = float(damping_coefficient)
        self._frequency = FREQUENCY_DEFAULT
        self.frequency = frequency

    # — drive state —
    @property
    def material(self) -> Material:
        return self._material

    @material.setter
    def material(self, material: Union[str, Material]) -> None:
        self._material = get_material(material)

    @property
    def frequency(self) -> float:
        return self._frequency

    @frequency.setter
    def frequency(self, freq: float) -> None:
        assert freq > 0, f"drive frequency must be positive, got {freq}"
        self._frequency = float(freq)

    @property
    def excitation(self) -> Tuple[float, float]:
        return self._excitation

    @excitation.setter
    def excitation(self, point: Tuple[float, float]) -> None:
        point = (float(point[0]), float(point[1]))
        if point != self._excitation:
            self._excitation = point
            self.invalidate()

    @property
    def damping_coefficient(self) -> float:
        return self._damping_coefficient

    @damping_coefficient.setter
    def damping_coefficient(self, value: float) -> None:
        assert value >= 0, f"damping coefficient must be non-negative, got {value}"
        if value != self._damping_coefficient:
            self._damping_coefficient = float(value)
            self.invalidate()

    def wave_number(self, freq=None):
        """k = sqrt(f / C) for the given frequency (default: the drive frequency)."""
        return self._material.wave_number(self._frequency if freq is None else freq)

    @property
    def current_wave_number(self) -> float:
        return float(self.wave_number())

    # — physics —
    @abstractmethod
    def invalidate(self) -> None:
        """Mark the mode coefficient cache stale."""

    @abstractmethod
    def damping(self) -> float:
        """gamma for the current plate dimensions."""

    @abstractmethod
    def displacement(self, x, y, wave_number: Optional[float] = None):
        """|psi(x, y)| at the given (default: current) wave number."""

    @abstractmethod
    def strength(self, freq):
        """Resonance strength at one or more drive frequencies."""
