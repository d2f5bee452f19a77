#!/usr/bin/env python
"""
Chladni Model

Session state of a driven plate covered in sand: the drive (material,
frequency, excitation point), the three plate shapes with their modal fields,
the sand grains and the resonance curve. Presentation layers mutate it
through the set_* methods and read it back through the query methods; step(dt)
advances the grains one frame while playing.
"""

import logging
from typing import Dict, Optional, Tuple, Union

import numpy as np

from chladni_constants import (
    FREQUENCY_MIN, FREQUENCY_MAX, FREQUENCY_DEFAULT, DAMPING_COEFFICIENT,
    DEFAULT_EXCITATION_X, DEFAULT_EXCITATION_Y, DEFAULT_GRAIN_COUNT, MAX_MODE,
)
from chladni_plate import ChladniPlate
from circular_plate import CircularPlate
from modal_field import ModalField
from particle_ensemble import BoundaryMode, ParticleEnsemble, get_boundary_mode
from plate_material import DEFAULT_MATERIAL, Material, get_material
from plate_parameters import BoundedParameter
from plate_shapes import AnnulusShape, BoundaryShape, PlateShape, PolygonShape, RectangleShape
from resonance_curve import ResonanceCurve

logger = logging.getLogger(__name__)

DEFAULT_SHAPE = PlateShape.RECTANGLE
DEFAULT_BOUNDARY_MODE = BoundaryMode.CLAMP


def get_plate_shape(shape) -> PlateShape:
    try:
        return PlateShape(shape)
    except ValueError:
        raise ValueError(f"Unknown plate shape '{shape}'") from None


class ChladniModel:
    """
    Driven plate with sand grains.

    Args:
        shape: Initial plate shape (PlateShape or its name).
        material: Initial material (Material or its name).
        grain_count (int): Initial number of grains.
        boundary_mode: What happens to grains leaving the plate.
        damping_coefficient (float): D shared by every plate field.
        max_mode (int): Modal truncation of the rectangular and polygonal fields.
        seed (int, optional): Seed for grain placement and stepping.
    """

    def __init__(self,
                 shape: Union[str, PlateShape] = DEFAULT_SHAPE,
                 material: Union[str, Material] = DEFAULT_MATERIAL,
                 grain_count: int = DEFAULT_GRAIN_COUNT,
                 boundary_mode: Union[str, BoundaryMode] = DEFAULT_BOUNDARY_MODE,
                 damping_coefficient: float = DAMPING_COEFFICIENT,
                 max_mode: int = MAX_MODE,
                 seed: Optional[int] = None):
        self.rng = np.random.default_rng(seed)
        self._material = get_material(material)
        self._excitation = (DEFAULT_EXCITATION_X, DEFAULT_EXCITATION_Y)
        self.is_playing = False

        self.frequency_param = BoundedParameter("frequency", FREQUENCY_DEFAULT, FREQUENCY_MIN, FREQUENCY_MAX)
        self.frequency_param.link(self._on_frequency_change)

        rectangle = RectangleShape(rng=self.rng)
        annulus = AnnulusShape(rng=self.rng)
        polygon = PolygonShape(rng=self.rng)
        self.shapes: Dict[PlateShape, BoundaryShape] = {
            PlateShape.RECTANGLE: rectangle,
            PlateShape.CIRCLE: annulus,
            PlateShape.GUITAR: polygon,
        }
        drive = dict(material=self._material, excitation=self._excitation,
                     frequency=FREQUENCY_DEFAULT, damping_coefficient=damping_coefficient)
        self.fields: Dict[PlateShape, ModalField] = {
            PlateShape.RECTANGLE: ChladniPlate(rectangle.width, rectangle.height, max_mode=max_mode, **drive),
            PlateShape.CIRCLE: CircularPlate(annulus.outer_radius, **drive),
            PlateShape.GUITAR: ChladniPlate(polygon.width, polygon.height, max_mode=max_mode,
                                            boundary=polygon, **drive),
        }
        for boundary in self.shapes.values():
            boundary.add_listener(self._on_geometry_change)

        self._shape = get_plate_shape(shape)
        self.ensemble = ParticleEnsemble(self.boundary, grain_count,
                                         get_boundary_mode(boundary_mode), rng=self.rng)
        self._curve = ResonanceCurve(self.field)
        self.set_excitation(*self._excitation)
        self.ensemble.initialize()

    # — active plate —
    @property
    def shape(self) -> PlateShape:
        return self._shape

    @property
    def boundary(self) -> BoundaryShape:
        return self.shapes[self._shape]

    @property
    def field(self) -> ModalField:
        return self.fields[self._shape]

    @property
    def material(self) -> Material:
        return self._material

    @property
    def frequency(self) -> float:
        return self.frequency_param.value

    @property
    def excitation(self) -> Tuple[float, float]:
        return self._excitation

    @property
    def grain_count(self) -> int:
        return self.ensemble.target_count

    @property
    def boundary_mode(self) -> BoundaryMode:
        return self.ensemble.boundary_mode

    # — setters —
    def set_shape(self, shape: Union[str, PlateShape]) -> None:
        """Switch plates: the excitation is pulled onto the new plate and the grains rescattered."""
        shape = get_plate_shape(shape)
        if shape is self._shape:
            return
        self._shape = shape
        self._curve.field = self.field
        self._curve.invalidate()
        self.set_excitation(*self._excitation)
        self.ensemble.set_boundary(self.boundary)
        logger.info("plate shape set to %s", shape.value)

    def set_material(self, material: Union[str, Material]) -> None:
        material = get_material(material)
        if material == self._material:
            return
        self._material = material
        for field in self.fields.values():
            field.material = material
        self._curve.invalidate()
        logger.info("plate material set to %s", material.name)

    def set_frequency(self, freq: float) -> None:
        """Drive frequency in Hz, clamped into [FREQUENCY_MIN, FREQUENCY_MAX]."""
        self.frequency_param.value = freq

    def _on_frequency_change(self, new: float, _old: float) -> None:
        for field in self.fields.values():
            field.frequency = new

    def set_excitation(self, x: float, y: float) -> None:
        """Move the drive point; points off the plate go to the nearest point on it."""
        point = self.boundary.clamp(float(x), float(y))
        previous = self.field.excitation
        self._excitation = point
        for field in self.fields.values():
            field.excitation = point
        if point != previous:
            self._curve.invalidate()

    def set_grain_count(self, count: int) -> None:
        """Any non-negative count; the grains are rescattered."""
        if count < 0:
            raise ValueError(f"Grain count must be non-negative, got {count}")
        self.ensemble.target_count = count
        logger.info("grain count set to %d", count)

    def set_boundary_mode(self, mode: Union[str, BoundaryMode]) -> None:
        self.ensemble.boundary_mode = get_boundary_mode(mode)

    # — geometry —
    def _sync_field(self, shape: PlateShape) -> None:
        boundary, field = self.shapes[shape], self.fields[shape]
        if shape is PlateShape.CIRCLE:
            field.set_radius(boundary.outer_radius)
        else:
            field.set_dimensions(boundary.width, boundary.height)

    def _on_geometry_change(self, boundary: BoundaryShape) -> None:
        self._sync_field(boundary.kind)
        if boundary is not self.boundary:
            return
        self.set_excitation(*self._excitation)
        self.ensemble.clamp_to_bounds()
        self._curve.invalidate()

    # — queries —
    def displacement(self, x, y):
        return self.field.displacement(x, y)

    def strength(self, freq):
        return self.field.strength(freq)

    def contains(self, x, y):
        return self.boundary.contains(x, y)

    def clamp(self, x, y):
        return self.boundary.clamp(x, y)

    def random_point(self) -> Tuple[float, float]:
        return self.boundary.random_point()

    @property
    def particle_positions(self) -> np.ndarray:
        return self.ensemble.positions

    @property
    def actual_particle_count(self) -> int:
        return self.ensemble.count

    @property
    def resonance_curve(self) -> ResonanceCurve:
        return self._curve

    def resonance_curve_data(self, sample_count: int):
        """Normalized resonance curve over the graph window around the drive frequency."""
        return self._curve.data(self.frequency, sample_count)

    def graph_window(self) -> Tuple[float, float]:
        return self._curve.window(self.frequency)

    # — lifecycle —
    def play(self) -> None:
        self.is_playing = True

    def pause(self) -> None:
        self.is_playing = False

    def initialize(self) -> None:
        self.ensemble.initialize()

    def regenerate(self) -> None:
        self.ensemble.regenerate()

    def step(self, dt: float) -> None:
        """Advance the grains by dt seconds; nothing moves while paused."""
        if not self.is_playing:
            return
        self.ensemble.step(dt, self.field)

    def reset(self) -> None:
        """Restore the default drive, geometry, grains and boundary mode, and stop playing."""
        self.is_playing = False
        self.set_material(DEFAULT_MATERIAL)
        self.frequency_param.reset()
        for boundary in self.shapes.values():
            boundary.reset()
        self.ensemble.boundary_mode = DEFAULT_BOUNDARY_MODE
        self.set_excitation(DEFAULT_EXCITATION_X, DEFAULT_EXCITATION_Y)
        self.ensemble.target_count = DEFAULT_GRAIN_COUNT
        self._curve.invalidate()
        logger.info("model reset")
