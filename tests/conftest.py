"""
Shared pytest fixtures.
"""

import numpy as np
import pytest

from chladni_plate import ChladniPlate
from circular_plate import CircularPlate
from plate_shapes import AnnulusShape, PolygonShape, RectangleShape


@pytest.fixture
def rng():
    """Seeded generator so sampled positions are reproducible"""
    return np.random.default_rng(1234)


@pytest.fixture
def square_plate():
    """0.32 m copper plate driven off-centre"""
    return ChladniPlate(0.32, 0.32, material="Copper", excitation=(0.03, 0.05), frequency=1200)


@pytest.fixture
def disc_plate():
    return CircularPlate(0.16, material="Aluminum", excitation=(0.04, 0.02), frequency=800)


@pytest.fixture
def rectangle(rng):
    return RectangleShape(rng=rng)


@pytest.fixture
def ring(rng):
    """Annulus with a 5 cm hole"""
    return AnnulusShape(outer_radius=0.16, inner_radius=0.05, rng=rng)


@pytest.fixture
def guitar(rng):
    return PolygonShape(rng=rng)


@pytest.fixture(params=["rectangle", "ring", "guitar"])
def any_shape(request):
    """Each boundary variant in turn"""
    return request.getfixturevalue(request.param)


@pytest.fixture
def scattered_points(rng):
    """Points scattered well beyond every default plate"""
    return rng.uniform(-0.4, 0.4, size=(500, 2))
