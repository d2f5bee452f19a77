"""
Tests for the Bessel-mode circular field
"""

import numpy as np
import pytest
from scipy.signal import find_peaks

from circular_plate import CircularPlate, bessel_zeros


class TestBesselZeros:
    def test_free_edge_uses_derivative_zeros(self):
        zeros = bessel_zeros(2, 3, "free")
        assert zeros.shape == (3, 3)
        assert zeros[0, 0] == pytest.approx(3.8317, abs=1e-4)
        assert zeros[1, 0] == pytest.approx(1.8412, abs=1e-4)

    def test_clamped_edge_uses_function_zeros(self):
        zeros = bessel_zeros(1, 2, "clamped")
        assert zeros[0, 0] == pytest.approx(2.4048, abs=1e-4)
        assert zeros[1, 0] == pytest.approx(3.8317, abs=1e-4)

    def test_unknown_condition(self):
        with pytest.raises(ValueError, match="boundary condition"):
            bessel_zeros(2, 2, "hinged")


class TestCircularPlate:
    def test_zero_outside_radius(self, disc_plate):
        assert disc_plate.displacement(0.2, 0.0) == 0.0
        assert disc_plate.displacement(0.05, 0.05) > 0.0

    def test_centred_drive_is_axisymmetric(self):
        plate = CircularPlate(0.16, excitation=(0.0, 0.0), frequency=1000)
        r = np.linspace(0.0, 0.15, 16)
        np.testing.assert_allclose(plate.displacement(r, 0 * r), plate.displacement(0 * r, r))
        np.testing.assert_allclose(plate.displacement(-r, 0 * r), plate.displacement(0 * r, -r))

    def test_scalar_and_array_agree(self, disc_plate):
        xs = np.array([0.0, 0.05, -0.1])
        ys = np.array([0.1, -0.02, 0.03])
        values = disc_plate.displacement(xs, ys)
        for x, y, value in zip(xs, ys, values):
            assert disc_plate.displacement(x, y) == pytest.approx(value)

    def test_radius_change_invalidates(self, disc_plate):
        disc_plate.displacement(0.01, 0.01)
        disc_plate.set_radius(0.12)
        assert disc_plate.mode_cache.cached_key is None
        assert disc_plate.width == pytest.approx(0.24)
        assert disc_plate.displacement(0.13, 0.0) == 0.0

    def test_has_resonance_peaks(self, disc_plate):
        curve = disc_plate.strength(np.arange(50.0, 4000.0, 0.25))
        peaks, _ = find_peaks(curve)
        assert len(peaks) >= 5

    def test_peak_at_first_axisymmetric_mode(self):
        plate = CircularPlate(0.16, excitation=(0.0, 0.0))
        k = bessel_zeros(0, 1)[0, 0] / 0.16
        f = plate.material.dispersion_constant * k * k
        assert plate.strength(f) > 10 * plate.strength(1.2 * f)
