#!/usr/bin/env python
"""
Plate Boundary Shapes

Boundary shapes confine the sand grains and the excitation point to the plate.
Every shape answers the same four questions: does it contain a point, what is
the nearest contained point, where is a uniformly random point inside it, and
what does its outline look like.

Classes:
    PlateShape: Tag naming the shape variant.
    BoundaryShape: Abstract interface shared by all variants.
    RectangleShape: Axis-aligned rectangle driven by width/height parameters.
    AnnulusShape: Solid disc or ring driven by outer/inner radius parameters.
    PolygonShape: Free-form polygon (a dreadnought guitar body by default)
                  driven by a uniform scale parameter.

All coordinates are plate-centred. contains() and clamp() accept either scalars
or numpy arrays of equal shape and answer in kind.
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np

from chladni_constants import (
    DEFAULT_PLATE_WIDTH, DEFAULT_PLATE_HEIGHT, MIN_PLATE_WIDTH, MIN_PLATE_HEIGHT,
    DEFAULT_OUTER_RADIUS, MIN_OUTER_RADIUS, MAX_OUTER_RADIUS,
    DEFAULT_INNER_RADIUS, MIN_INNER_RADIUS, MAX_INNER_RADIUS, MIN_ANNULAR_GAP,
    GUITAR_BASE_WIDTH, GUITAR_BASE_HEIGHT,
    DEFAULT_GUITAR_SCALE, MIN_GUITAR_SCALE, MAX_GUITAR_SCALE,
    EDGE_TOLERANCE, TWO_PI,
)
from plate_parameters import BoundedParameter

logger = logging.getLogger(__name__)


class PlateShape(str, Enum):
    RECTANGLE = "rectangle"
    CIRCLE = "circle"
    GUITAR = "guitar"


# Normalized dreadnought body outline in [-1, 1], upper bout at +y, clockwise.
DREADNOUGHT_VERTICES = np.array([
    # upper bout
    (0.0, 1.0), (0.15, 0.98), (0.28, 0.92), (0.38, 0.82), (0.44, 0.70), (0.46, 0.58),
    # waist, right
    (0.42, 0.45), (0.36, 0.32), (0.32, 0.20), (0.30, 0.08), (0.32, -0.05),
    # lower bout, right
    (0.38, -0.18), (0.46, -0.32), (0.52, -0.46), (0.54, -0.60), (0.52, -0.74),
    (0.46, -0.86), (0.36, -0.94), (0.22, -0.98),
    (0.0, -1.0),
    # lower bout, left
    (-0.22, -0.98), (-0.36, -0.94), (-0.46, -0.86), (-0.52, -0.74), (-0.54, -0.60),
    (-0.52, -0.46), (-0.46, -0.32), (-0.38, -0.18),
    # waist, left
    (-0.32, -0.05), (-0.30, 0.08), (-0.32, 0.20), (-0.36, 0.32), (-0.42, 0.45),
    # upper bout, left
    (-0.46, 0.58), (-0.44, 0.70), (-0.38, 0.82), (-0.28, 0.92), (-0.15, 0.98),
])


def _as_arrays(x, y) -> Tuple[np.ndarray, np.ndarray, bool]:
    x, y = np.broadcast_arrays(np.asarray(x, dtype=float), np.asarray(y, dtype=float))
    return x, y, x.ndim == 0


def _closed(loop: np.ndarray) -> np.ndarray:
    return np.vstack([loop, loop[:1]])


class BoundaryShape(ABC):
    """
    Interface of a plate boundary.

    Subclasses own the BoundedParameters that drive their geometry and report
    every change to listeners registered with add_listener(), so that the
    particles, the excitation point and the modal field can follow the plate.
    """

    kind: PlateShape

    def __init__(self, rng: Optional[np.random.Generator] = None):
        self.rng = rng if rng is not None else np.random.default_rng()
        self._listeners: List[Callable[["BoundaryShape"], None]] = []

    # — geometry change notification —
    def add_listener(self, listener: Callable[["BoundaryShape"], None]) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Callable[["BoundaryShape"], None]) -> None:
        self._listeners.remove(listener)

    def _notify(self, *_args) -> None:
        for listener in list(self._listeners):
            listener(self)

    # — contract —
    @abstractmethod
    def contains(self, x, y):
        """Return True (or a boolean array) where (x, y) lies inside the plate."""

    @abstractmethod
    def clamp(self, x, y):
        """Return the nearest contained point; contained points are returned unchanged."""

    @abstractmethod
    def bounds(self) -> Tuple[float, float, float, float]:
        """Bounding box as (xmin, ymin, xmax, ymax)."""

    @abstractmethod
    def outline(self) -> List[np.ndarray]:
        """Closed (N, 2) vertex loops for drawing the plate edge."""

    @abstractmethod
    def reset(self) -> None:
        """Restore the default geometry."""

    @property
    def width(self) -> float:
        xmin, _, xmax, _ = self.bounds()
        return xmax - xmin

    @property
    def height(self) -> float:
        _, ymin, _, ymax = self.bounds()
        return ymax - ymin

    def random_points(self, count: int) -> np.ndarray:
        """
        Draw `count` points uniformly inside the shape by rejection sampling
        in the bounding box.

        Returns:
            np.ndarray: (count, 2) array of positions.
        """
        xmin, ymin, xmax, ymax = self.bounds()
        points = np.empty((count, 2))
        filled = 0
        while filled < count:
            batch = 2 * (count - filled) + 16
            xs = self.rng.uniform(xmin, xmax, batch)
            ys = self.rng.uniform(ymin, ymax, batch)
            keep = self.contains(xs, ys)
            xs, ys = xs[keep], ys[keep]
            take = min(xs.size, count - filled)
            points[filled:filled + take, 0] = xs[:take]
            points[filled:filled + take, 1] = ys[:take]
            filled += take
        return points

    def random_point(self) -> Tuple[float, float]:
        x, y = self.random_points(1)[0]
        return float(x), float(y)


class RectangleShape(BoundaryShape):
    """Axis-aligned rectangle centred on the origin."""

    kind = PlateShape.RECTANGLE

    def __init__(
        self,
        width: float = DEFAULT_PLATE_WIDTH,
        height: float = DEFAULT_PLATE_HEIGHT,
        min_width: float = MIN_PLATE_WIDTH,
        min_height: float = MIN_PLATE_HEIGHT,
        rng: Optional[np.random.Generator] = None
    ):
        super().__init__(rng)
        self.width_param = BoundedParameter("plate width", width, min_width, max(width, DEFAULT_PLATE_WIDTH))
        self.height_param = BoundedParameter("plate height", height, min_height, max(height, DEFAULT_PLATE_HEIGHT))
        self.width_param.link(self._notify)
        self.height_param.link(self._notify)

    @property
    def half_width(self) -> float:
        return self.width_param.value / 2

    @property
    def half_height(self) -> float:
        return self.height_param.value / 2

    def contains(self, x, y):
        x, y, scalar = _as_arrays(x, y)
        inside = (np.abs(x) <= self.half_width) & (np.abs(y) <= self.half_height)
        return bool(inside) if scalar else inside

    def clamp(self, x, y):
        x, y, scalar = _as_arrays(x, y)
        hw, hh = self.half_width, self.half_height
        cx = np.clip(x, -hw, hw)
        cy = np.clip(y, -hh, hh)
        return (float(cx), float(cy)) if scalar else (cx, cy)

    def bounds(self):
        hw, hh = self.half_width, self.half_height
        return -hw, -hh, hw, hh

    def random_points(self, count: int) -> np.ndarray:
        hw, hh = self.half_width, self.half_height
        points = np.empty((count, 2))
        points[:, 0] = self.rng.uniform(-hw, hw, count)
        points[:, 1] = self.rng.uniform(-hh, hh, count)
        return points

    def outline(self):
        hw, hh = self.half_width, self.half_height
        return [_closed(np.array([(-hw, -hh), (hw, -hh), (hw, hh), (-hw, hh)]))]

    def reset(self) -> None:
        self.width_param.reset()
        self.height_param.reset()


class AnnulusShape(BoundaryShape):
    """
    Solid disc (inner radius 0) or annular ring centred on the origin.

    The inner radius is kept at most outer - MIN_ANNULAR_GAP: its upper bound
    follows the outer radius, so shrinking the disc drags the hole with it.
    """

    kind = PlateShape.CIRCLE

    def __init__(
        self,
        outer_radius: float = DEFAULT_OUTER_RADIUS,
        inner_radius: float = DEFAULT_INNER_RADIUS,
        min_gap: float = MIN_ANNULAR_GAP,
        rng: Optional[np.random.Generator] = None
    ):
        super().__init__(rng)
        self.min_gap = min_gap
        self.outer_param = BoundedParameter("outer radius", outer_radius, MIN_OUTER_RADIUS, MAX_OUTER_RADIUS)
        self.inner_param = BoundedParameter("inner radius", 0.0, MIN_INNER_RADIUS, MAX_INNER_RADIUS)
        self._update_inner_range()
        self.inner_param.default = inner_radius
        self.inner_param.value = inner_radius

        self.outer_param.link(self._on_outer_change)
        self.inner_param.link(self._notify)

    def _update_inner_range(self) -> None:
        upper = max(MIN_INNER_RADIUS, min(MAX_INNER_RADIUS, self.outer_param.value - self.min_gap))
        self.inner_param.set_range(MIN_INNER_RADIUS, upper)

    def _on_outer_change(self, *_args) -> None:
        self._update_inner_range()
        self._notify()

    @property
    def outer_radius(self) -> float:
        return self.outer_param.value

    @property
    def inner_radius(self) -> float:
        return self.inner_param.value

    @property
    def is_annular(self) -> bool:
        return self.inner_param.value > 0

    def contains(self, x, y):
        x, y, scalar = _as_arrays(x, y)
        r2 = x * x + y * y
        inside = (r2 <= self.outer_radius ** 2) & (r2 >= self.inner_radius ** 2)
        return bool(inside) if scalar else inside

    def clamp(self, x, y):
        """
        Radial projection onto whichever radius is violated.

        A point at the exact centre of a ring has no direction; it goes to the
        inner edge along +x.
        """
        x, y, scalar = _as_arrays(x, y)
        outer, inner = self.outer_radius, self.inner_radius
        r2 = x * x + y * y
        r = np.sqrt(r2)

        scale = np.ones_like(r)
        beyond = r2 > outer ** 2
        in_hole = (r2 < inner ** 2) & (r > 0)
        centre = (r == 0) & (inner > 0)
        with np.errstate(divide="ignore", invalid="ignore"):
            scale = np.where(beyond, (outer - EDGE_TOLERANCE) / r, scale)
            scale = np.where(in_hole, (inner + EDGE_TOLERANCE) / r, scale)
        cx = np.where(centre, inner, x * scale)
        cy = np.where(centre, 0.0, y * scale)
        return (float(cx), float(cy)) if scalar else (cx, cy)

    def bounds(self):
        r = self.outer_radius
        return -r, -r, r, r

    def outline(self, segments: int = 128):
        theta = np.linspace(0, TWO_PI, segments, endpoint=False)
        ring = np.column_stack((np.cos(theta), np.sin(theta)))
        loops = [_closed(ring * self.outer_radius)]
        if self.is_annular:
            loops.append(_closed(ring[::-1] * self.inner_radius))
        return loops

    def reset(self) -> None:
        self.outer_param.reset()
        self.inner_param.reset()


class PolygonShape(BoundaryShape):
    """
    Free-form polygon built from normalized vertices in [-1, 1], stretched to
    base_width x base_height and scaled uniformly by the scale parameter.
    """

    kind = PlateShape.GUITAR

    def __init__(
        self,
        vertices: Optional[Sequence[Sequence[float]]] = None,
        base_width: float = GUITAR_BASE_WIDTH,
        base_height: float = GUITAR_BASE_HEIGHT,
        scale: float = DEFAULT_GUITAR_SCALE,
        rng: Optional[np.random.Generator] = None
    ):
        super().__init__(rng)
        normalized = DREADNOUGHT_VERTICES if vertices is None else np.asarray(vertices, dtype=float)
        if normalized.ndim != 2 or normalized.shape[1] != 2:
            raise ValueError(f"Polygon vertices must have shape (N, 2), got {normalized.shape}")
        self.normalized_vertices = normalized
        self.base_width = base_width
        self.base_height = base_height
        self.scale_param = BoundedParameter("polygon scale", scale, MIN_GUITAR_SCALE, MAX_GUITAR_SCALE)
        self.vertices = np.empty_like(normalized)
        self._update_vertices()
        self.scale_param.link(self._on_scale_change)

    def _update_vertices(self) -> None:
        half = np.array([self.base_width, self.base_height]) * self.scale_param.value / 2
        np.multiply(self.normalized_vertices, half, out=self.vertices)

    def _on_scale_change(self, *_args) -> None:
        self._update_vertices()
        self._notify()

    @property
    def scale(self) -> float:
        return self.scale_param.value

    # Nominal body size the modal field is built on; bounds() is the vertex
    # extent used for sampling.
    @property
    def width(self) -> float:
        return self.base_width * self.scale

    @property
    def height(self) -> float:
        return self.base_height * self.scale

    def contains(self, x, y):
        """Ray casting: count edge crossings of a ray towards +x."""
        x, y, scalar = _as_arrays(x, y)
        inside = np.zeros(x.shape, dtype=bool)
        n = len(self.vertices)
        if n >= 3:
            vx, vy = self.vertices[:, 0], self.vertices[:, 1]
            j = n - 1
            for i in range(n):
                crosses = (vy[i] > y) != (vy[j] > y)
                with np.errstate(divide="ignore", invalid="ignore"):
                    x_cross = (vx[j] - vx[i]) * (y - vy[i]) / (vy[j] - vy[i]) + vx[i]
                inside ^= crosses & (x < x_cross)
                j = i
        return bool(inside) if scalar else inside

    def _nearest_on_edges(self, px: np.ndarray, py: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        best_d2 = np.full(px.shape, np.inf)
        best_x = px.copy()
        best_y = py.copy()
        n = len(self.vertices)
        for i in range(n):
            x1, y1 = self.vertices[i]
            x2, y2 = self.vertices[(i + 1) % n]
            dx, dy = x2 - x1, y2 - y1
            length2 = dx * dx + dy * dy
            if length2 == 0:
                t = np.zeros_like(px)
            else:
                t = np.clip(((px - x1) * dx + (py - y1) * dy) / length2, 0.0, 1.0)
            nx = x1 + t * dx
            ny = y1 + t * dy
            d2 = (px - nx) ** 2 + (py - ny) ** 2
            closer = d2 < best_d2
            best_d2 = np.where(closer, d2, best_d2)
            best_x = np.where(closer, nx, best_x)
            best_y = np.where(closer, ny, best_y)
        return best_x, best_y, best_d2

    def clamp(self, x, y):
        """
        Nearest point on the polygon edges for points outside, nudged inward
        by EDGE_TOLERANCE so the result passes contains().
        """
        x, y, scalar = _as_arrays(x, y)
        shape = x.shape
        cx = x.ravel().copy()
        cy = y.ravel().copy()
        if len(self.vertices) >= 3:
            outside = ~self.contains(cx, cy)
            if outside.any():
                px, py = cx[outside], cy[outside]
                qx, qy, d2 = self._nearest_on_edges(px, py)

                dist = np.sqrt(d2)
                safe = np.where(dist > 0, dist, 1.0)
                ux = np.where(dist > 0, (qx - px) / safe, 0.0)
                uy = np.where(dist > 0, (qy - py) / safe, 0.0)
                nx = qx + EDGE_TOLERANCE * ux
                ny = qy + EDGE_TOLERANCE * uy

                missed = ~self.contains(nx, ny)
                if missed.any():
                    # fall back to stepping towards the vertex centroid
                    ax, ay = self.vertices.mean(axis=0)
                    vx, vy = ax - qx[missed], ay - qy[missed]
                    norm = np.hypot(vx, vy)
                    norm = np.where(norm > 0, norm, 1.0)
                    nx[missed] = qx[missed] + EDGE_TOLERANCE * vx / norm
                    ny[missed] = qy[missed] + EDGE_TOLERANCE * vy / norm
                    still_out = int(np.count_nonzero(~self.contains(nx, ny)))
                    if still_out:
                        logger.warning("%d clamped point(s) left on the polygon edge", still_out)

                cx[outside] = nx
                cy[outside] = ny
        cx, cy = cx.reshape(shape), cy.reshape(shape)
        return (float(cx), float(cy)) if scalar else (cx, cy)

    def bounds(self):
        if len(self.vertices) == 0:
            return 0.0, 0.0, 0.0, 0.0
        xmin, ymin = self.vertices.min(axis=0)
        xmax, ymax = self.vertices.max(axis=0)
        return float(xmin), float(ymin), float(xmax), float(ymax)

    def random_points(self, count: int) -> np.ndarray:
        assert len(self.vertices) >= 3, "cannot sample a polygon with fewer than 3 vertices"
        return super().random_points(count)

    def outline(self):
        if len(self.vertices) == 0:
            return []
        return [_closed(self.vertices.copy())]

    def reset(self) -> None:
        self.scale_param.reset()
