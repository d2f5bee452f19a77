#!/usr/bin/env python
"""
Sand Grain Ensemble

Grains take a random-direction step each frame whose length is proportional to
the local vibration amplitude. Grains on antinodes keep jumping, grains near
nodal lines barely move, so the sand gathers on the nodal pattern.

Positions live in a preallocated (capacity, 2) arena; only the first `count`
rows are live.
"""

import logging
from enum import Enum
from typing import Optional

import numpy as np

from chladni_constants import (
    DEFAULT_GRAIN_COUNT, PARTICLE_STEP_SCALE, STEP_TIME_SCALE, TARGET_FPS, TWO_PI,
)
from modal_field import ModalField
from plate_shapes import BoundaryShape

logger = logging.getLogger(__name__)


class BoundaryMode(str, Enum):
    CLAMP = "clamp"     # grains stepping off the plate are put back on its edge
    REMOVE = "remove"   # grains stepping off the plate fall off and are dropped


def get_boundary_mode(mode) -> BoundaryMode:
    try:
        return BoundaryMode(mode)
    except ValueError:
        raise ValueError(f"Unknown boundary mode '{mode}'") from None


class ParticleEnsemble:
    """
    Sand grains on a plate.

    Args:
        boundary (BoundaryShape): Plate the grains live on.
        target_count (int): Number of grains placed by initialize().
        boundary_mode (BoundaryMode): What happens to grains stepping off the plate.
        rng (np.random.Generator, optional): Source of step directions.
    """

    def __init__(self,
                 boundary: BoundaryShape,
                 target_count: int = DEFAULT_GRAIN_COUNT,
                 boundary_mode=BoundaryMode.CLAMP,
                 rng: Optional[np.random.Generator] = None):
        if target_count < 0:
            raise ValueError(f"Grain count must be non-negative, got {target_count}")
        self.boundary = boundary
        self.boundary_mode = get_boundary_mode(boundary_mode)
        self.rng = rng if rng is not None else np.random.default_rng()
        self._target_count = int(target_count)
        self._arena = np.zeros((self._target_count, 2))
        self._count = 0

    # — population —
    @property
    def target_count(self) -> int:
        return self._target_count

    @target_count.setter
    def target_count(self, count: int) -> None:
        if count < 0:
            raise ValueError(f"Grain count must be non-negative, got {count}")
        self._target_count = int(count)
        self.initialize()

    @property
    def count(self) -> int:
        return self._count

    @property
    def capacity(self) -> int:
        return self._arena.shape[0]

    @property
    def positions(self) -> np.ndarray:
        """Read-only (count, 2) view of the live grain positions."""
        view = self._arena[:self._count]
        view.flags.writeable = False
        return view

    def initialize(self) -> None:
        """Scatter target_count grains uniformly over the plate."""
        if self._target_count > self.capacity:
            self._arena = np.zeros((self._target_count, 2))
        if self._target_count:
            self._arena[:self._target_count] = self.boundary.random_points(self._target_count)
        self._count = self._target_count
        logger.info("placed %d grains on the %s plate", self._count, self.boundary.kind.value)

    def regenerate(self) -> None:
        self.initialize()

    def set_boundary(self, boundary: BoundaryShape) -> None:
        """Move the grains onto a new plate shape, rescattering them."""
        self.boundary = boundary
        self.initialize()

    def clamp_to_bounds(self) -> None:
        """Pull every live grain back onto the plate after the geometry changed."""
        if not self._count:
            return
        live = self._arena[:self._count]
        live[:, 0], live[:, 1] = self.boundary.clamp(live[:, 0], live[:, 1])

    # — animation —
    def step(self, dt: float, field: ModalField) -> None:
        """
        Advance every grain by one frame of dt seconds.

        step = PARTICLE_STEP_SCALE * |psi| * (dt * TARGET_FPS) * STEP_TIME_SCALE
        in a uniformly random direction.
        """
        n = self._count
        if not n:
            return
        live = self._arena[:n]
        amplitude = np.abs(field.displacement(live[:, 0], live[:, 1]))
        length = PARTICLE_STEP_SCALE * amplitude * (dt * TARGET_FPS) * STEP_TIME_SCALE
        theta = self.rng.uniform(0.0, TWO_PI, n)
        live[:, 0] += length * np.cos(theta)
        live[:, 1] += length * np.sin(theta)

        if self.boundary_mode is BoundaryMode.CLAMP:
            live[:, 0], live[:, 1] = self.boundary.clamp(live[:, 0], live[:, 1])
            return

        keep = self.boundary.contains(live[:, 0], live[:, 1])
        kept = int(np.count_nonzero(keep))
        if kept < n:
            self._arena[:kept] = live[keep]
            self._count = kept
            logger.debug("%d grains fell off the plate, %d left", n - kept, kept)
