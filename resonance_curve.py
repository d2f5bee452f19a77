#!/usr/bin/env python
"""
Resonance Curve

Precomputes the resonance strength of a plate over the full drive range so
that a graph can show a window around the current frequency without
re-evaluating the modal sum. The curve recomputes lazily after invalidate().
"""

import logging
from typing import Optional, Tuple

import numpy as np
from scipy.signal import find_peaks

from chladni_constants import (
    FREQUENCY_MIN, FREQUENCY_MAX, CURVE_SAMPLES_PER_HZ, GRAPH_WINDOW_WIDTH,
)
from modal_field import ModalField

logger = logging.getLogger(__name__)

# Samples evaluated per vectorized strength() call
CHUNK_SIZE = 1000


class ResonanceCurve:
    """
    Strength samples of a ModalField between f_min and f_max.

    Attributes:
        frequencies (np.ndarray): Sample frequencies (Hz).
        strengths (np.ndarray): Raw strength at each sample, valid once computed.
        max_strength (float): Largest sample, used for normalization.
    """

    def __init__(self,
                 field: ModalField,
                 f_min: float = FREQUENCY_MIN,
                 f_max: float = FREQUENCY_MAX,
                 samples_per_hz: int = CURVE_SAMPLES_PER_HZ,
                 window_width: float = GRAPH_WINDOW_WIDTH):
        assert 0 < f_min < f_max
        self.field = field
        self.f_min = f_min
        self.f_max = f_max
        self.samples_per_hz = samples_per_hz
        self.window_width = window_width
        total = int(round((f_max - f_min) * samples_per_hz))
        self.frequencies = f_min + np.arange(total) / samples_per_hz
        self.strengths = np.zeros(total)
        self.max_strength = 0.0
        self._valid = False

    def invalidate(self) -> None:
        self._valid = False

    @property
    def is_valid(self) -> bool:
        return self._valid

    def recompute(self) -> None:
        """Evaluate strength at every sample frequency, in chunks."""
        for start in range(0, self.frequencies.size, CHUNK_SIZE):
            stop = start + CHUNK_SIZE
            self.strengths[start:stop] = self.field.strength(self.frequencies[start:stop])
        self.max_strength = float(self.strengths.max()) if self.strengths.size else 0.0
        self._valid = True
        logger.debug("resonance curve recomputed (%d samples, max %.4g)",
                     self.strengths.size, self.max_strength)

    def _ensure_valid(self) -> None:
        if not self._valid:
            self.recompute()

    def window(self, current_frequency: float) -> Tuple[float, float]:
        """A window_width range centred on current_frequency, shifted to stay in range."""
        half = self.window_width / 2
        lo, hi = current_frequency - half, current_frequency + half
        if lo < self.f_min:
            lo, hi = self.f_min, min(self.f_min + self.window_width, self.f_max)
        if hi > self.f_max:
            lo, hi = max(self.f_max - self.window_width, self.f_min), self.f_max
        return lo, hi

    def data(self, current_frequency: float, sample_count: int) -> Tuple[np.ndarray, np.ndarray]:
        """
        Window frequencies and strengths normalized to the global maximum.

        Returns:
            (freqs, normalized): arrays of length sample_count; normalized is all
            zeros when the curve has no resonance at all.
        """
        self._ensure_valid()
        lo, hi = self.window(current_frequency)
        freqs = np.linspace(lo, hi, sample_count)
        if self.max_strength <= 0:
            return freqs, np.zeros(sample_count)
        index = np.round((freqs - self.f_min) * self.samples_per_hz).astype(int)
        index = np.clip(index, 0, self.strengths.size - 1)
        normalized = np.minimum(self.strengths[index] / self.max_strength, 1.0)
        return freqs, normalized

    def peak_frequencies(self, prominence: Optional[float] = None) -> np.ndarray:
        """
        Frequencies of the local maxima of the curve.

        Args:
            prominence (float, optional): Minimum relative prominence (fraction
                of the maximum strength) a peak needs to be reported.
        """
        self._ensure_valid()
        kwargs = {}
        if prominence is not None and self.max_strength > 0:
            kwargs["prominence"] = prominence * self.max_strength
        peaks, _ = find_peaks(self.strengths, **kwargs)
        return self.frequencies[peaks]
