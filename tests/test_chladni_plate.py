"""
Tests for the rectangular modal field
"""

import numpy as np
import pytest
from scipy.signal import find_peaks

from chladni_plate import ChladniPlate
from plate_shapes import PolygonShape


class TestDisplacement:
    def test_zero_on_nodal_line(self):
        # centred in x, off-centre in y: with m, n <= 1 only the (0, 1) mode survives,
        # whose nodal line is y = 0
        plate = ChladniPlate(0.32, 0.32, excitation=(0.0, 0.05), max_mode=1, frequency=800)
        xs = np.linspace(-0.16, 0.16, 21)
        on_line = plate.displacement(xs, np.zeros_like(xs))
        off_line = plate.displacement(xs, np.full_like(xs, 0.1))
        assert plate.mode_cache.mode_count == 1
        assert np.all(off_line > 0)
        np.testing.assert_allclose(on_line, 0.0, atol=1e-9 * off_line.max())

    def test_scalar_and_array_agree(self, square_plate):
        xs = np.array([-0.1, 0.0, 0.07])
        ys = np.array([0.05, -0.12, 0.0])
        values = square_plate.displacement(xs, ys)
        assert values.shape == (3,)
        for x, y, value in zip(xs, ys, values):
            scalar = square_plate.displacement(x, y)
            assert isinstance(scalar, float)
            assert scalar == pytest.approx(value)

    def test_grid_shape_preserved(self, square_plate):
        X, Y, Z = square_plate.compute_field(40)
        assert X.shape == Y.shape == Z.shape == (40, 40)
        assert np.all(Z >= 0)

    def test_explicit_wave_number(self, square_plate):
        k = square_plate.wave_number(2000.0)
        at_k = square_plate.displacement(0.05, 0.05, wave_number=k)
        square_plate.frequency = 2000.0
        assert square_plate.displacement(0.05, 0.05) == pytest.approx(at_k)

    def test_boundary_mask(self):
        guitar = PolygonShape()
        plate = ChladniPlate(guitar.width, guitar.height, excitation=(0.02, 0.03), boundary=guitar)
        # corner of the bounding box lies outside the body
        xmin, ymin, xmax, ymax = guitar.bounds()
        assert plate.displacement(xmax * 0.99, ymax * 0.99) == 0.0
        assert plate.displacement(0.0, -0.05) > 0.0

    def test_invalid_dimensions(self):
        with pytest.raises(AssertionError):
            ChladniPlate(0.0, 0.32)


class TestModeCache:
    def test_reused_while_wave_number_unchanged(self, square_plate):
        square_plate.displacement(0.01, 0.02)
        square_plate.displacement(np.zeros(10), np.zeros(10))
        assert square_plate.mode_cache.recompute_count == 1

    def test_frequency_change_recomputes(self, square_plate):
        square_plate.displacement(0.01, 0.02)
        square_plate.frequency = 1500
        square_plate.displacement(0.01, 0.02)
        assert square_plate.mode_cache.recompute_count == 2

    @pytest.mark.parametrize("mutate", [
        lambda plate: setattr(plate, "excitation", (-0.02, 0.01)),
        lambda plate: plate.set_dimensions(0.28, 0.3),
        lambda plate: setattr(plate, "damping_coefficient", 0.05),
    ], ids=["excitation", "dimensions", "damping"])
    def test_mutation_invalidates(self, square_plate, mutate):
        before = square_plate.displacement(0.04, -0.06)
        mutate(square_plate)
        assert square_plate.mode_cache.cached_key is None
        after = square_plate.displacement(0.04, -0.06)
        assert square_plate.mode_cache.recompute_count == 2
        assert after != pytest.approx(before)

    def test_same_excitation_keeps_cache(self, square_plate):
        square_plate.displacement(0.0, 0.0)
        square_plate.excitation = (0.03, 0.05)
        assert square_plate.mode_cache.cached_key is not None

    def test_deterministic(self):
        kwargs = dict(material="Zinc", excitation=(0.05, -0.02), frequency=2300)
        xs = np.linspace(-0.15, 0.15, 50)
        first = ChladniPlate(**kwargs).displacement(xs, xs[::-1])
        second = ChladniPlate(**kwargs).displacement(xs, xs[::-1])
        np.testing.assert_array_equal(first, second)

    def test_buffer_not_reallocated(self, square_plate):
        real = square_plate.mode_cache.real
        square_plate.displacement(0.0, 0.0)
        square_plate.frequency = 3000
        square_plate.displacement(0.0, 0.0)
        assert square_plate.mode_cache.real is real


class TestStrength:
    def test_has_resonance_peaks(self, square_plate):
        freqs = np.arange(50.0, 4000.0, 0.25)
        curve = square_plate.strength(freqs)
        peaks, _ = find_peaks(curve)
        assert len(peaks) >= 5

    def test_scalar_matches_array(self, square_plate):
        freqs = np.array([300.0, 1200.0, 3100.0])
        values = square_plate.strength(freqs)
        for f, value in zip(freqs, values):
            scalar = square_plate.strength(f)
            assert isinstance(scalar, float)
            assert scalar == pytest.approx(value)

    def test_peak_at_mode_frequency(self, square_plate):
        # (1, 0) mode: k_mn = pi / a, f = C k^2
        f10 = square_plate.material.dispersion_constant * (np.pi / 0.32) ** 2
        assert square_plate.strength(f10) > 10 * square_plate.strength(f10 * 1.3)

    def test_no_active_modes(self):
        # centred drive with m, n <= 1 excites only (0, 0), which is skipped
        plate = ChladniPlate(max_mode=1, excitation=(0.0, 0.0))
        assert plate.strength(1000.0) == 0.0
        assert plate.displacement(0.05, 0.05) == 0.0

    def test_non_positive_frequency(self, square_plate):
        with pytest.raises(AssertionError):
            square_plate.strength(0.0)
