"""hingebox_kernel.py

Planar geometry kernel for the hinged-box generator.

A Region is a set of closed polygon paths in millimetres (y up). Outer
boundaries wind counter-clockwise (positive area), holes clockwise.
Boolean operations run through pyclipper on integer coordinates scaled by
`scale` (default 1000, i.e. 1 micron resolution), so every result is
quantised to that grid and identical inputs give identical outputs.

Curves (circles, rounded corners) are flattened to polygons whose chords
deviate from the true arc by at most `arc_tolerance`.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

import pyclipper

Point = Tuple[float, float]
Path = Tuple[Point, ...]

DEFAULT_SCALE = 1000.0
DEFAULT_ARC_TOLERANCE = 0.01
MIN_ARC_SEGMENTS = 16


class GeometryKernelError(RuntimeError):
    """Raised when the boolean engine rejects its input."""


def path_area(points: Sequence[Point]) -> float:
    """Signed shoelace area; positive for counter-clockwise paths in y-up coordinates."""
    if len(points) < 3:
        return 0.0
    a = 0.0
    for (x0, y0), (x1, y1) in zip(points, list(points[1:]) + [points[0]]):
        a += x0 * y1 - x1 * y0
    return 0.5 * a


def path_centroid(points: Sequence[Point]) -> Point:
    a = path_area(points)
    if abs(a) < 1e-12:
        xs = [p[0] for p in points]
        ys = [p[1] for p in points]
        return (sum(xs) / len(xs), sum(ys) / len(ys))
    cx = cy = 0.0
    for (x0, y0), (x1, y1) in zip(points, list(points[1:]) + [points[0]]):
        cross = x0 * y1 - x1 * y0
        cx += (x0 + x1) * cross
        cy += (y0 + y1) * cross
    return (cx / (6.0 * a), cy / (6.0 * a))


@dataclass(frozen=True)
class Region:
    paths: Tuple[Path, ...] = ()

    def is_empty(self) -> bool:
        return not self.paths

    @property
    def outers(self) -> Tuple[Path, ...]:
        return tuple(p for p in self.paths if path_area(p) > 0)

    @property
    def holes(self) -> Tuple[Path, ...]:
        return tuple(p for p in self.paths if path_area(p) < 0)

    def area(self) -> float:
        """Net filled area (outers minus holes)."""
        return sum(path_area(p) for p in self.paths)

    def bounds(self) -> Tuple[float, float, float, float]:
        if not self.paths:
            return (0.0, 0.0, 0.0, 0.0)
        xs = [x for p in self.paths for x, _ in p]
        ys = [y for p in self.paths for _, y in p]
        return (min(xs), min(ys), max(xs), max(ys))

    def contains(self, x: float, y: float) -> bool:
        """Even-odd point test; points exactly on a boundary are unspecified."""
        inside = False
        for p in self.paths:
            n = len(p)
            for i in range(n):
                x0, y0 = p[i]
                x1, y1 = p[(i + 1) % n]
                if (y0 > y) != (y1 > y):
                    xc = x0 + (y - y0) * (x1 - x0) / (y1 - y0)
                    if x < xc:
                        inside = not inside
        return inside

    def translated(self, dx: float, dy: float) -> "Region":
        if dx == 0 and dy == 0:
            return self
        return Region(tuple(tuple((x + dx, y + dy) for x, y in p) for p in self.paths))


class ClipperKernel:
    """Boolean geometry backed by pyclipper.

    The model builder receives an instance at construction time; tests can
    substitute any object with the same methods.
    """

    def __init__(self, *, scale: float = DEFAULT_SCALE, arc_tolerance: float = DEFAULT_ARC_TOLERANCE):
        if scale <= 0:
            raise ValueError("scale must be > 0")
        if arc_tolerance <= 0:
            raise ValueError("arc_tolerance must be > 0")
        self.scale = float(scale)
        self.arc_tolerance = float(arc_tolerance)

    # -- primitives ---------------------------------------------------------

    def rectangle(self, x: float, y: float, w: float, h: float) -> Region:
        pts = ((x, y), (x + w, y), (x + w, y + h), (x, y + h))
        return self._normalise([pts])

    def circle(self, cx: float, cy: float, r: float) -> Region:
        n = self.arc_segments(r, 2.0 * math.pi)
        pts = tuple(
            (cx + r * math.cos(2.0 * math.pi * k / n), cy + r * math.sin(2.0 * math.pi * k / n))
            for k in range(n)
        )
        return self._normalise([pts])

    def rounded_rectangle(self, x: float, y: float, w: float, h: float, r: float) -> Region:
        r = max(0.0, min(r, w / 2, h / 2))
        if r <= 0:
            return self.rectangle(x, y, w, h)
        n = self.arc_segments(r, math.pi / 2)
        # Corner centres counter-clockwise from lower right, each paired with its start angle.
        corners = (
            ((x + w - r, y + r), -math.pi / 2),
            ((x + w - r, y + h - r), 0.0),
            ((x + r, y + h - r), math.pi / 2),
            ((x + r, y + r), math.pi),
        )
        pts: List[Point] = []
        for (ccx, ccy), a0 in corners:
            for k in range(n + 1):
                a = a0 + (math.pi / 2) * k / n
                pts.append((ccx + r * math.cos(a), ccy + r * math.sin(a)))
        return self._normalise([tuple(pts)])

    def arc_segments(self, r: float, sweep: float) -> int:
        if r <= self.arc_tolerance:
            return max(1, int(math.ceil(MIN_ARC_SEGMENTS * sweep / (2.0 * math.pi))))
        step = 2.0 * math.acos(1.0 - self.arc_tolerance / r)
        full = max(MIN_ARC_SEGMENTS, int(math.ceil(2.0 * math.pi / step)))
        return max(1, int(math.ceil(full * sweep / (2.0 * math.pi))))

    # -- booleans -----------------------------------------------------------

    def union(self, a: Region, b: Region) -> Region:
        if b.is_empty():
            return a
        if a.is_empty():
            return b
        return self._execute(pyclipper.CT_UNION, a, b)

    def difference(self, a: Region, b: Region) -> Region:
        if a.is_empty() or b.is_empty():
            return a
        return self._execute(pyclipper.CT_DIFFERENCE, a, b)

    def intersection(self, a: Region, b: Region) -> Region:
        if a.is_empty() or b.is_empty():
            return Region()
        return self._execute(pyclipper.CT_INTERSECTION, a, b)

    # -- internals ----------------------------------------------------------

    def _to_clipper(self, paths: Iterable[Path]) -> List[List[Tuple[int, int]]]:
        s = self.scale
        return [[(int(round(x * s)), int(round(y * s))) for x, y in p] for p in paths]

    def _from_clipper(self, paths) -> Region:
        s = self.scale
        out = [tuple((px / s, py / s) for px, py in p) for p in paths if len(p) >= 3]
        # Stable order: outers before holes, then by lowest vertex.
        out.sort(key=lambda p: (path_area(p) < 0, min(p), len(p)))
        return Region(tuple(out))

    def _normalise(self, paths: Sequence[Path]) -> Region:
        """Quantise a freshly built primitive through a self-union."""
        pc = pyclipper.Pyclipper()
        try:
            pc.AddPaths(self._to_clipper(paths), pyclipper.PT_SUBJECT, True)
        except pyclipper.ClipperException as exc:
            raise GeometryKernelError(f"degenerate primitive: {exc}") from exc
        res = pc.Execute(pyclipper.CT_UNION, pyclipper.PFT_NONZERO, pyclipper.PFT_NONZERO)
        return self._from_clipper(res)

    def _execute(self, op: int, a: Region, b: Region) -> Region:
        pc = pyclipper.Pyclipper()
        try:
            pc.AddPaths(self._to_clipper(a.paths), pyclipper.PT_SUBJECT, True)
            pc.AddPaths(self._to_clipper(b.paths), pyclipper.PT_CLIP, True)
        except pyclipper.ClipperException as exc:
            raise GeometryKernelError(str(exc)) from exc
        res = pc.Execute(op, pyclipper.PFT_NONZERO, pyclipper.PFT_NONZERO)
        return self._from_clipper(res)


def union_all(kernel, base: Optional[Region], regions: Sequence[Region]) -> Optional[Region]:
    """Fold `regions` into `base` one union at a time.

    With no regions the base comes back untouched and the kernel is never called.
    """
    acc = base
    for r in regions:
        acc = r if acc is None else kernel.union(acc, r)
    return acc


def subtract_all(kernel, base: Region, cuts: Sequence[Region]) -> Region:
    if not cuts:
        return base
    u = union_all(kernel, None, cuts)
    return kernel.difference(base, u) if u is not None else base
