#!/usr/bin/env python3
"""hingeboxgen.py

Parametric panel geometry for a laser-cut box with a hinged lid.

Six panels are produced (Bottom, Lid, Front, Back, Left, Right):
- Finger joints: every jointed edge is split into an even number of pitch
  cells; teeth sit on every other cell, centred on the edge midpoint, and
  stay clear of the corners. Mating edges of unequal length (the Bottom sits
  between Front and Back, so it is 2*T shallower than the sides) share one
  pitch so their teeth and slots line up.
- Kerf handling (in-plane fit):
    tab_drawn  = feature - kerf   (stubs cut undersize)
    slot_drawn = feature + kerf   (slots cut oversize, plus a small over-cut
                                   in depth so they clear the mating face)
  Neither ever drops below MIN_FEATURE_WIDTH.
- Hinge: square knuckles on the Lid, round ears with pin holes on Left/Right.
- Latch: rounded tab on the Lid, matching slot in the Front.
- Layout: two rows on one sheet, spaced by footprints (panel plus
  protruding tabs) and an effective gap.

Geometry is y-up, in millimetres. Boolean work is delegated to an injected
kernel (see hingebox_kernel.ClipperKernel).
"""

from __future__ import annotations

import argparse
import json
import logging
import math
import sys
from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from hingebox_kernel import ClipperKernel, Point, Region, subtract_all, union_all

__version__ = "0.1"

logger = logging.getLogger(__name__)

# Narrowest tab or slot worth cutting, mm.
MIN_FEATURE_WIDTH = 0.2
# Smallest web left between neighbouring tab cells; raised to the kerf when the kerf is wider.
MIN_GAP_FLOOR = 0.4
# Slots always run this far past the mating face.
MIN_SLOT_OVERCUT = 0.05
# Tolerance on end-clearance comparisons.
GEOMETRIC_EPSILON = 1e-6

HINGE_PIN_CLEARANCE = 1.0
LID_TAB_HEIGHT_FACTOR = 1.5
ACCESS_HOLE_RADIUS = 4.0
ACCESS_HOLE_INSET_X = 12.0  # from the Right panel's right edge
ACCESS_HOLE_Y = 25.0  # from the Right panel's bottom edge
MIN_BOTTOM_DEPTH = 1.0
LAYOUT_GAP_EXTRA = 2.0

SIDES = ("top", "right", "bottom", "left")
PANEL_NAMES = ("Bottom", "Lid", "Front", "Back", "Left", "Right")


def fmt(n: float) -> str:
    return f"{n:.3f}".rstrip("0").rstrip(".")


def _clamp(v, lo, hi): return max(lo, min(hi, v))


def _round_half_up(v: float) -> int:
    return int(math.floor(v + 0.5))


# ---------------------------------------------------------------------------
# Parameters
# ---------------------------------------------------------------------------


class InvalidParameterError(ValueError):
    """A box parameter is missing its contract (finite, positive, ...)."""

    def __init__(self, field: str, value: Any, reason: str):
        super().__init__(f"{field}: {reason} (got {value!r})")
        self.field = field
        self.value = value
        self.reason = reason


@dataclass(frozen=True)
class BoxParams:
    width: float = 80.0
    depth: float = 50.0
    height: float = 40.0
    thickness: float = 3.0
    kerf: float = 0.12
    tab_width: float = 10.0
    margin: float = 12.0
    add_right_hole: bool = True

    @property
    def bottom_depth(self) -> float:
        """Bottom and Lid depth: the Bottom fits between the Front and Back walls."""
        return max(MIN_BOTTOM_DEPTH, self.depth - 2 * self.thickness)

    @classmethod
    def from_dict(cls, params: Mapping[str, Any]) -> "BoxParams":
        """Build params from a loose mapping (browser form, JSON file).

        Accepts the front end's camelCase keys as well as snake_case. Missing
        keys take the defaults; unknown keys are ignored.
        """
        if not isinstance(params, Mapping):
            raise TypeError("params must be a mapping")
        cfg: Dict[str, Any] = {}
        for key, value in params.items():
            name = _PARAM_ALIASES.get(key, key)
            if name in _PARAM_FIELDS and value is not None:
                cfg[name] = value

        defaults = cls()
        values: Dict[str, Any] = {}
        for name in _NUMERIC_FIELDS:
            raw = cfg.get(name, getattr(defaults, name))
            if isinstance(raw, bool):
                raise InvalidParameterError(name, raw, "must be a number")
            try:
                values[name] = float(raw)
            except (TypeError, ValueError):
                raise InvalidParameterError(name, raw, "must be a number") from None
        values["add_right_hole"] = _get_bool(cfg, "add_right_hole", default=defaults.add_right_hole)
        return cls(**values)

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


_PARAM_FIELDS = tuple(f.name for f in fields(BoxParams))
_NUMERIC_FIELDS = tuple(n for n in _PARAM_FIELDS if n != "add_right_hole")
_POSITIVE_FIELDS = ("width", "depth", "height", "thickness", "tab_width", "margin")
_PARAM_ALIASES = {
    "tabWidth": "tab_width",
    "addRightHole": "add_right_hole",
    "wallThickness": "thickness",
    "nominalTabWidth": "tab_width",
    "interPanelMargin": "margin",
}


def _get_bool(cfg: Mapping[str, Any], key: str, *, default: bool) -> bool:
    if key not in cfg:
        return bool(default)
    v = cfg[key]
    if isinstance(v, bool):
        return v
    if isinstance(v, (int, float)):
        return bool(v)
    if isinstance(v, str):
        s = v.strip().lower()
        if s in ("true", "yes", "on", "1"):
            return True
        if s in ("false", "no", "off", "0", ""):
            return False
    raise InvalidParameterError(key, v, "must be a boolean")


def validate_params(p: BoxParams) -> BoxParams:
    """Fail fast on unusable input; returns `p` unchanged when it is valid."""
    for name in _NUMERIC_FIELDS:
        v = getattr(p, name)
        if not isinstance(v, (int, float)) or isinstance(v, bool) or not math.isfinite(v):
            raise InvalidParameterError(name, v, "must be a finite number")
    for name in _POSITIVE_FIELDS:
        v = getattr(p, name)
        if v <= 0:
            raise InvalidParameterError(name, v, "must be > 0")
    if p.kerf < 0:
        raise InvalidParameterError("kerf", p.kerf, "must be >= 0")
    if not isinstance(p.add_right_hole, bool):
        raise InvalidParameterError("add_right_hole", p.add_right_hole, "must be a boolean")
    return p


def coerce_params(params: Any) -> BoxParams:
    if isinstance(params, BoxParams):
        return params
    if isinstance(params, Mapping):
        return BoxParams.from_dict(params)
    raise TypeError(f"expected BoxParams or a mapping, got {type(params).__name__}")


# ---------------------------------------------------------------------------
# Edge roles and box topology
# ---------------------------------------------------------------------------


class EdgeRole:
    PLAIN = "plain"
    MALE = "male"  # protruding tabs
    FEMALE = "female"  # receiving slots
    ALL = (PLAIN, MALE, FEMALE)


@dataclass(frozen=True)
class EdgeRoles:
    top: str = EdgeRole.PLAIN
    right: str = EdgeRole.PLAIN
    bottom: str = EdgeRole.PLAIN
    left: str = EdgeRole.PLAIN

    def __post_init__(self):
        for side in SIDES:
            if getattr(self, side) not in EdgeRole.ALL:
                raise ValueError(f"unknown edge role for {side}: {getattr(self, side)!r}")

    @classmethod
    def uniform(cls, role: str) -> "EdgeRoles":
        return cls(top=role, right=role, bottom=role, left=role)

    def role(self, side: str) -> str:
        if side not in SIDES:
            raise ValueError(f"unknown side: {side!r}")
        return getattr(self, side)

    def as_dict(self) -> Dict[str, str]:
        return {side: getattr(self, side) for side in SIDES}


BOTTOM_EDGES = EdgeRoles.uniform(EdgeRole.MALE)
WALL_EDGES = EdgeRoles(top=EdgeRole.PLAIN, right=EdgeRole.MALE, bottom=EdgeRole.FEMALE, left=EdgeRole.MALE)
SIDE_EDGES = EdgeRoles(top=EdgeRole.PLAIN, right=EdgeRole.FEMALE, bottom=EdgeRole.FEMALE, left=EdgeRole.FEMALE)
LID_EDGES = EdgeRoles()

PANEL_EDGES: Dict[str, EdgeRoles] = {
    "Bottom": BOTTOM_EDGES,
    "Lid": LID_EDGES,
    "Front": WALL_EDGES,
    "Back": WALL_EDGES,
    "Left": SIDE_EDGES,
    "Right": SIDE_EDGES,
}

# (male panel, side) -> (female panel, side)
MATING_EDGES: Tuple[Tuple[Tuple[str, str], Tuple[str, str]], ...] = (
    (("Bottom", "top"), ("Back", "bottom")),
    (("Bottom", "bottom"), ("Front", "bottom")),
    (("Bottom", "left"), ("Left", "bottom")),
    (("Bottom", "right"), ("Right", "bottom")),
    (("Front", "left"), ("Left", "right")),
    (("Front", "right"), ("Right", "left")),
    (("Back", "left"), ("Right", "right")),
    (("Back", "right"), ("Left", "left")),
)


# ---------------------------------------------------------------------------
# Edge Feature Planner
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class EdgePlan:
    """Tab plan along one edge, in edge coordinates (0 .. length)."""

    length: float
    role: str
    count: int = 0  # pitch cells; even and >= 2, or 0 when the edge is plain
    pitch: float = 0.0
    feature_width: float = 0.0
    male_width: float = 0.0
    female_width: float = 0.0
    overcut: float = 0.0
    end_clearance: float = 0.0
    centers: Tuple[float, ...] = ()

    @property
    def feasible(self) -> bool:
        return bool(self.centers)


def compute_tab_count(length: float, tab_width: float, min_gap: float) -> int:
    """Number of pitch cells along an edge: floor(len / (tab + gap)), forced even, 0 if below 2."""
    if not math.isfinite(length) or length <= 0 or not math.isfinite(tab_width) or tab_width <= 0:
        return 0
    n = int(math.floor(length / (tab_width + min_gap)))
    if n % 2 == 1:
        n -= 1
    if n < 2:
        return 0
    return n


def plan_edge(
    length: float,
    role: str,
    *,
    tab_width: float,
    thickness: float,
    kerf: float,
    pitch_length: Optional[float] = None,
) -> EdgePlan:
    """Plan the teeth (male) or slots (female) of one edge.

    The pitch grid is laid over `pitch_length` (defaults to `length`) and
    centred on this edge's own midpoint. Teeth land on every other grid
    position counting from the one nearest the midpoint, and positions too
    close to either end are dropped.

    Never raises: an edge with no room for teeth comes back with no centers
    and is cut straight.
    """
    empty = EdgePlan(length=length, role=role)
    if role == EdgeRole.PLAIN:
        return empty

    span = length if pitch_length is None else pitch_length
    min_gap = max(MIN_GAP_FLOOR, kerf)
    n = compute_tab_count(span, tab_width, min_gap)
    if n < 2:
        logger.debug(f"{role} edge {fmt(length)}mm: too short for {fmt(tab_width)}mm tabs, cutting plain")
        return empty

    pitch = span / n
    feature_w = min(tab_width, pitch - min_gap)
    if feature_w <= MIN_FEATURE_WIDTH:
        logger.debug(f"{role} edge {fmt(length)}mm: no room for a tab at pitch {fmt(pitch)}mm, cutting plain")
        return empty

    male_w = max(MIN_FEATURE_WIDTH, feature_w - kerf)
    female_w = max(MIN_FEATURE_WIDTH, feature_w + kerf)
    over = max(kerf * 0.5, MIN_SLOT_OVERCUT)
    end_clear = max(thickness, min_gap)
    half = feature_w / 2

    # delta shifts the cell-centre grid by half a pitch so that one grid point
    # sits exactly on the midpoint; shift re-anchors a borrowed pitch grid.
    k0 = _round_half_up((span / 2 - pitch / 2) / pitch)
    c0 = k0 * pitch + pitch / 2
    delta = span / 2 - c0
    shift = (length - span) / 2

    lo = end_clear + half - GEOMETRIC_EPSILON
    hi = length - end_clear - half + GEOMETRIC_EPSILON
    centers: List[float] = []
    for i in range(n):
        if (i - k0) % 2 != 0:
            continue
        c = i * pitch + pitch / 2 + delta + shift
        if c < lo or c > hi:
            continue
        centers.append(c)

    if not centers:
        logger.debug(f"{role} edge {fmt(length)}mm: every tab falls inside the corner clearance, cutting plain")

    return EdgePlan(
        length=length,
        role=role,
        count=n,
        pitch=pitch,
        feature_width=feature_w,
        male_width=male_w,
        female_width=female_w,
        overcut=over,
        end_clearance=end_clear,
        centers=tuple(centers),
    )


@dataclass(frozen=True)
class TabFeature:
    """One tab or slot rectangle in panel coordinates."""

    side: str
    role: str
    center: float
    width: float
    depth: float
    x: float
    y: float
    w: float
    h: float

    def to_region(self, kernel) -> Region:
        return kernel.rectangle(self.x, self.y, self.w, self.h)


@dataclass(frozen=True)
class EdgeFeatures:
    plan: EdgePlan
    males: Tuple[TabFeature, ...] = ()
    females: Tuple[TabFeature, ...] = ()


def build_edge_features(
    panel_w: float,
    panel_h: float,
    side: str,
    role: str,
    *,
    tab_width: float,
    thickness: float,
    kerf: float,
    pitch_length: Optional[float] = None,
) -> EdgeFeatures:
    if side not in SIDES:
        raise ValueError(f"unknown side: {side!r}")
    horizontal = side in ("top", "bottom")
    length = panel_w if horizontal else panel_h
    plan = plan_edge(length, role, tab_width=tab_width, thickness=thickness, kerf=kerf, pitch_length=pitch_length)

    t = thickness
    males: List[TabFeature] = []
    females: List[TabFeature] = []
    for c in plan.centers:
        if role == EdgeRole.MALE:
            w = plan.male_width
            if side == "top":
                rect = (c - w / 2, panel_h, w, t)
            elif side == "bottom":
                rect = (c - w / 2, -t, w, t)
            elif side == "left":
                rect = (-t, c - w / 2, t, w)
            else:
                rect = (panel_w, c - w / 2, t, w)
            males.append(TabFeature(side, role, c, w, t, *rect))
        elif role == EdgeRole.FEMALE:
            w = plan.female_width
            d = t + plan.overcut
            if side == "top":
                rect = (_clamp(c - w / 2, 0.0, panel_w - w), panel_h - t, w, d)
            elif side == "bottom":
                rect = (_clamp(c - w / 2, 0.0, panel_w - w), -plan.overcut, w, d)
            elif side == "left":
                rect = (-plan.overcut, _clamp(c - w / 2, 0.0, panel_h - w), d, w)
            else:
                rect = (panel_w - t, _clamp(c - w / 2, 0.0, panel_h - w), d, w)
            females.append(TabFeature(side, role, c, w, d, *rect))
    return EdgeFeatures(plan=plan, males=tuple(males), females=tuple(females))


# ---------------------------------------------------------------------------
# Panel Assembler
# ---------------------------------------------------------------------------


class FeatureKind:
    HINGE_KNUCKLE = "hinge_knuckle"
    HINGE_EAR = "hinge_ear"
    HINGE_HOLE = "hinge_hole"
    LATCH_TAB = "latch_tab"
    LATCH_SLOT = "latch_slot"
    ACCESS_HOLE = "access_hole"


UNION = "union"
SUBTRACT = "subtract"


@dataclass(frozen=True)
class PanelFeature:
    """A fixed (non-joinery) feature applied to a panel.

    For circles (x, y) is the centre; for rectangles the lower-left corner.
    """

    kind: str
    operation: str
    shape: str  # rect | rounded_rect | circle
    x: float
    y: float
    width: float
    height: float
    radius: float = 0.0

    def to_region(self, kernel) -> Region:
        if self.shape == "circle":
            return kernel.circle(self.x, self.y, self.radius)
        if self.shape == "rounded_rect":
            return kernel.rounded_rectangle(self.x, self.y, self.width, self.height, self.radius)
        return kernel.rectangle(self.x, self.y, self.width, self.height)


@dataclass(frozen=True)
class PanelOutline:
    name: str
    width: float
    height: float
    edges: EdgeRoles
    region: Region
    males: Tuple[TabFeature, ...] = ()
    females: Tuple[TabFeature, ...] = ()
    plans: Tuple[Tuple[str, EdgePlan], ...] = ()
    features: Tuple[PanelFeature, ...] = ()

    def plan(self, side: str) -> EdgePlan:
        for s, plan in self.plans:
            if s == side:
                return plan
        return EdgePlan(length=self.width if side in ("top", "bottom") else self.height, role=self.edges.role(side))

    def features_of(self, kind: str) -> Tuple[PanelFeature, ...]:
        return tuple(f for f in self.features if f.kind == kind)

    def with_feature(self, kernel, feature: PanelFeature) -> "PanelOutline":
        shape = feature.to_region(kernel)
        if feature.operation == UNION:
            region = kernel.union(self.region, shape)
        elif feature.operation == SUBTRACT:
            region = kernel.difference(self.region, shape)
        else:
            raise ValueError(f"unknown feature operation: {feature.operation!r}")
        return replace(self, region=region, features=self.features + (feature,))


def assemble_panel(
    name: str,
    width: float,
    height: float,
    edges: EdgeRoles,
    *,
    tab_width: float,
    thickness: float,
    kerf: float,
    kernel,
    pitch_lengths: Optional[Mapping[str, float]] = None,
) -> PanelOutline:
    """Rectangle + union of male tabs - union of female slots."""
    pitch_lengths = pitch_lengths or {}
    males: List[TabFeature] = []
    females: List[TabFeature] = []
    plans: List[Tuple[str, EdgePlan]] = []
    for side in SIDES:
        ef = build_edge_features(
            width,
            height,
            side,
            edges.role(side),
            tab_width=tab_width,
            thickness=thickness,
            kerf=kerf,
            pitch_length=pitch_lengths.get(side),
        )
        males.extend(ef.males)
        females.extend(ef.females)
        plans.append((side, ef.plan))

    region = kernel.rectangle(0.0, 0.0, width, height)
    tabs = union_all(kernel, None, [m.to_region(kernel) for m in males])
    if tabs is not None:
        region = kernel.union(region, tabs)
    region = subtract_all(kernel, region, [f.to_region(kernel) for f in females])

    return PanelOutline(
        name=name,
        width=width,
        height=height,
        edges=edges,
        region=region,
        males=tuple(males),
        females=tuple(females),
        plans=tuple(plans),
    )


# ---------------------------------------------------------------------------
# Hinge & Latch Feature Builder
# ---------------------------------------------------------------------------


def add_lid_hinges(lid: PanelOutline, *, thickness: float, kernel) -> PanelOutline:
    """Two T x T knuckles just outside the lid's left and right edges, 2T below its far edge."""
    t = thickness
    y = lid.height - 2 * t
    for x in (-t, lid.width):
        lid = lid.with_feature(kernel, PanelFeature(FeatureKind.HINGE_KNUCKLE, UNION, "rect", x, y, t, t))
    return lid


def add_lid_latch_tab(lid: PanelOutline, *, thickness: float, tab_width: float, kernel) -> PanelOutline:
    tab_w = 2 * tab_width
    tab_h = LID_TAB_HEIGHT_FACTOR * thickness
    r = min(0.35 * tab_h, 0.4 * tab_w)
    tab = PanelFeature(FeatureKind.LATCH_TAB, UNION, "rounded_rect", lid.width / 2 - tab_w / 2, -tab_h, tab_w, tab_h, r)
    return lid.with_feature(kernel, tab)


def add_hinge_ear(
    panel: PanelOutline,
    *,
    thickness: float,
    side: str,
    kernel,
    clearance: float = HINGE_PIN_CLEARANCE,
) -> PanelOutline:
    """Round ear with a pin hole near the top corner on the hinge side.

    The ear is unioned first so the hole cuts through the merged outline.
    """
    if side not in ("left", "right"):
        raise ValueError(f"hinge side must be 'left' or 'right', got {side!r}")
    t = thickness
    r_hole = (t + clearance) / 2
    r_outer = (t + clearance + 2 * t) / 2
    cx = 2.5 * t if side == "left" else panel.width - 2.5 * t
    cy = panel.height - 0.5 * t
    panel = panel.with_feature(
        kernel, PanelFeature(FeatureKind.HINGE_EAR, UNION, "circle", cx, cy, 2 * r_outer, 2 * r_outer, r_outer)
    )
    return panel.with_feature(
        kernel, PanelFeature(FeatureKind.HINGE_HOLE, SUBTRACT, "circle", cx, cy, 2 * r_hole, 2 * r_hole, r_hole)
    )


def add_front_latch_slot(front: PanelOutline, *, thickness: float, tab_width: float, kerf: float, kernel) -> PanelOutline:
    slot_w = 2 * tab_width
    slot_h = thickness + 2 * kerf
    slot = PanelFeature(
        FeatureKind.LATCH_SLOT,
        SUBTRACT,
        "rect",
        front.width / 2 - slot_w / 2,
        front.height - slot_h + kerf,
        slot_w,
        slot_h + kerf,
    )
    return front.with_feature(kernel, slot)


def add_access_hole(panel: PanelOutline, *, kernel, radius: float = ACCESS_HOLE_RADIUS) -> PanelOutline:
    cx = panel.width - ACCESS_HOLE_INSET_X
    cy = ACCESS_HOLE_Y
    hole = PanelFeature(FeatureKind.ACCESS_HOLE, SUBTRACT, "circle", cx, cy, 2 * radius, 2 * radius, radius)
    return panel.with_feature(kernel, hole)


# ---------------------------------------------------------------------------
# Layout Packer
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Footprint:
    width: float
    height: float


@dataclass(frozen=True)
class Placement:
    """Where a panel lands on the sheet.

    (x, y) is the footprint's lower-left corner; `origin` is where the bare
    rectangle's (0, 0) ends up.
    """

    x: float
    y: float
    footprint: Footprint
    origin: Point


def compute_footprint(width: float, height: float, edges: EdgeRoles, thickness: float) -> Footprint:
    extra_x = (thickness if edges.left == EdgeRole.MALE else 0.0) + (thickness if edges.right == EdgeRole.MALE else 0.0)
    extra_y = (thickness if edges.bottom == EdgeRole.MALE else 0.0) + (thickness if edges.top == EdgeRole.MALE else 0.0)
    return Footprint(width + extra_x, height + extra_y)


def effective_gap(margin: float, thickness: float) -> float:
    return max(margin, thickness + LAYOUT_GAP_EXTRA)


def place_at(edges: EdgeRoles, footprint: Footprint, thickness: float, x0: float, y0: float) -> Placement:
    ox = x0 + (thickness if edges.left == EdgeRole.MALE else 0.0)
    oy = y0 + (thickness if edges.bottom == EdgeRole.MALE else 0.0)
    return Placement(x=x0, y=y0, footprint=footprint, origin=(ox, oy))


def layout_panels(
    panels: Mapping[str, PanelOutline],
    *,
    thickness: float,
    margin: float,
    lid_footprint: Footprint,
) -> Dict[str, Placement]:
    """Two fixed rows: Bottom and Lid, then Front, Back, Left, Right.

    This is tuned for the six-panel box only. The Lid is nudged right by one
    thickness so its knuckles clear Bottom's tabs.
    """
    t = thickness
    g = effective_gap(margin, t)
    fp = {name: compute_footprint(p.width, p.height, p.edges, t) for name, p in panels.items()}
    fp["Lid"] = lid_footprint

    out: Dict[str, Placement] = {}
    x = y = g
    out["Bottom"] = place_at(panels["Bottom"].edges, fp["Bottom"], t, x, y)
    x += fp["Bottom"].width + g
    out["Lid"] = Placement(x=x, y=y, footprint=fp["Lid"], origin=(x + t, y))

    x = g
    y += max(fp["Bottom"].height, fp["Lid"].height) + g
    for name in ("Front", "Back", "Left", "Right"):
        out[name] = place_at(panels[name].edges, fp[name], t, x, y)
        x += fp[name].width + g
    return out


# ---------------------------------------------------------------------------
# Model Builder
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PlacedPanel:
    panel: PanelOutline
    placement: Placement

    @property
    def name(self) -> str:
        return self.panel.name


@dataclass(frozen=True)
class BoxDrawing:
    params: BoxParams
    panels: Tuple[PlacedPanel, ...]
    origin: Point = (0.0, 0.0)
    units: str = "mm"

    def __getitem__(self, name: str) -> PlacedPanel:
        for placed in self.panels:
            if placed.name == name:
                return placed
        raise KeyError(name)

    def __iter__(self) -> Iterator[PlacedPanel]:
        return iter(self.panels)

    def __len__(self) -> int:
        return len(self.panels)

    def names(self) -> Tuple[str, ...]:
        return tuple(p.name for p in self.panels)

    def absolute_region(self, name: str) -> Region:
        placed = self[name]
        ox, oy = placed.placement.origin
        return placed.panel.region.translated(self.origin[0] + ox, self.origin[1] + oy)

    def extents(self) -> Tuple[float, float, float, float]:
        boxes = [self.absolute_region(p.name).bounds() for p in self.panels if not p.panel.region.is_empty()]
        if not boxes:
            return (0.0, 0.0, 0.0, 0.0)
        return (
            min(b[0] for b in boxes),
            min(b[1] for b in boxes),
            max(b[2] for b in boxes),
            max(b[3] for b in boxes),
        )

    def zeroed(self) -> "BoxDrawing":
        """Shift the root origin so the lowest extents sit at (0, 0)."""
        minx, miny, _, _ = self.extents()
        return replace(self, origin=(self.origin[0] - minx, self.origin[1] - miny))

    def summary(self) -> Dict[str, Any]:
        minx, miny, maxx, maxy = self.extents()
        return {
            "units": self.units,
            "origin": [_r(self.origin[0]), _r(self.origin[1])],
            "extents": {"width": _r(maxx - minx), "height": _r(maxy - miny)},
            "params": self.params.as_dict(),
            "panels": [
                {
                    "name": p.name,
                    "width": _r(p.panel.width),
                    "height": _r(p.panel.height),
                    "edges": p.panel.edges.as_dict(),
                    "placement": {
                        "x": _r(p.placement.x),
                        "y": _r(p.placement.y),
                        "origin": [_r(p.placement.origin[0]), _r(p.placement.origin[1])],
                        "footprint": {
                            "width": _r(p.placement.footprint.width),
                            "height": _r(p.placement.footprint.height),
                        },
                    },
                    "tabs": {"male": len(p.panel.males), "female": len(p.panel.females)},
                }
                for p in self.panels
            ],
        }

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready geometry for an external exporter (absolute coordinates)."""
        out = self.summary()
        for entry, placed in zip(out["panels"], self.panels):
            region = self.absolute_region(placed.name)
            entry["outers"] = [_path_list(p) for p in region.outers]
            entry["holes"] = [_path_list(p) for p in region.holes]
            entry["features"] = [asdict(f) for f in placed.panel.features]
        return out


def _r(v: float) -> float:
    return round(v, 3)


def _path_list(path) -> List[List[float]]:
    return [[_r(x), _r(y)] for x, y in path]


class BoxModelBuilder:
    """Builds the placed six-panel drawing for one set of parameters.

    The geometry kernel is passed in; a fresh ClipperKernel is used when
    none is given.
    """

    def __init__(self, kernel=None):
        self.kernel = kernel if kernel is not None else ClipperKernel()

    def build(self, params) -> BoxDrawing:
        p = validate_params(coerce_params(params))
        k = self.kernel
        W, D, H, T = p.width, p.depth, p.height, p.thickness
        BD = p.bottom_depth
        logger.debug(f"building box {fmt(W)}x{fmt(D)}x{fmt(H)}mm, t={fmt(T)} kerf={fmt(p.kerf)} tab={fmt(p.tab_width)}")

        common = dict(tab_width=p.tab_width, thickness=T, kerf=p.kerf, kernel=k)
        # Bottom's side edges mate with the full-depth bottom edges of Left/Right.
        bottom = assemble_panel("Bottom", W, BD, BOTTOM_EDGES, pitch_lengths={"left": D, "right": D}, **common)
        lid = assemble_panel("Lid", W, BD, LID_EDGES, **common)
        front = assemble_panel("Front", W, H, WALL_EDGES, **common)
        back = assemble_panel("Back", W, H, WALL_EDGES, **common)
        left = assemble_panel("Left", D, H, SIDE_EDGES, **common)
        right = assemble_panel("Right", D, H, SIDE_EDGES, **common)

        lid = add_lid_hinges(lid, thickness=T, kernel=k)
        left = add_hinge_ear(left, thickness=T, side="left", kernel=k)
        right = add_hinge_ear(right, thickness=T, side="right", kernel=k)
        lid = add_lid_latch_tab(lid, thickness=T, tab_width=p.tab_width, kernel=k)
        front = add_front_latch_slot(front, thickness=T, tab_width=p.tab_width, kerf=p.kerf, kernel=k)
        if p.add_right_hole:
            right = add_access_hole(right, kernel=k)

        panels = {"Bottom": bottom, "Lid": lid, "Front": front, "Back": back, "Left": left, "Right": right}
        placements = layout_panels(panels, thickness=T, margin=p.margin, lid_footprint=Footprint(W + 2 * T, D))
        drawing = BoxDrawing(
            params=p,
            panels=tuple(PlacedPanel(panels[name], placements[name]) for name in PANEL_NAMES),
        )
        return drawing.zeroed()


def generate_model(params, *, kernel=None) -> BoxDrawing:
    return BoxModelBuilder(kernel).build(params)


# ---------------------------------------------------------------------------
# Advisory warnings
# ---------------------------------------------------------------------------


@dataclass
class WarningMsg:
    severity: str  # error|warn|info
    code: str
    message: str
    fix: str


def check_interlock(drawing: BoxDrawing, *, tolerance: Optional[float] = None) -> List[str]:
    """Male tabs without a matching slot on the mating edge.

    Positions are compared as offsets from each edge's midpoint.
    """
    tol = tolerance if tolerance is not None else max(drawing.params.kerf, GEOMETRIC_EPSILON)
    problems: List[str] = []
    for (m_name, m_side), (f_name, f_side) in MATING_EDGES:
        m_plan = drawing[m_name].panel.plan(m_side)
        f_plan = drawing[f_name].panel.plan(f_side)
        f_offsets = [c - f_plan.length / 2 for c in f_plan.centers]
        for c in m_plan.centers:
            off = c - m_plan.length / 2
            if not any(abs(off - fo) <= tol for fo in f_offsets):
                problems.append(f"{m_name}.{m_side} tab at {fmt(c)}mm has no slot on {f_name}.{f_side}")
    return problems


def _disc_overlaps_rect(cx: float, cy: float, r: float, x: float, y: float, w: float, h: float) -> bool:
    dx = cx - _clamp(cx, x, x + w)
    dy = cy - _clamp(cy, y, y + h)
    return dx * dx + dy * dy < (r - GEOMETRIC_EPSILON) ** 2


def collect_warnings(params, drawing: Optional[BoxDrawing] = None) -> List[WarningMsg]:
    p = validate_params(coerce_params(params))
    if drawing is None:
        drawing = generate_model(p)
    warnings: List[WarningMsg] = []

    if p.kerf >= p.thickness:
        warnings.append(WarningMsg("warn", "KERF_GE_THICKNESS",
                                   "Kerf is greater than or equal to the material thickness (check units).",
                                   "Measure the kerf; typical values are 0.1 to 0.3 mm."))
    if p.margin < p.thickness + LAYOUT_GAP_EXTRA:
        warnings.append(WarningMsg("info", "GAP_RAISED",
                                   f"Margin {fmt(p.margin)}mm is below thickness + {fmt(LAYOUT_GAP_EXTRA)}mm; "
                                   f"panels are spaced {fmt(effective_gap(p.margin, p.thickness))}mm apart.",
                                   "Increase the margin to control spacing explicitly."))
    if p.depth - 2 * p.thickness < MIN_BOTTOM_DEPTH:
        warnings.append(WarningMsg("warn", "BOTTOM_DEPTH_CLAMPED",
                                   f"Depth leaves no room for the bottom; bottom and lid clamped to {fmt(MIN_BOTTOM_DEPTH)}mm.",
                                   "Increase the depth or use thinner material."))
    if p.add_right_hole:
        cx = p.depth - ACCESS_HOLE_INSET_X
        r = ACCESS_HOLE_RADIUS
        if cx - r < 0 or cx + r > p.depth or ACCESS_HOLE_Y - r < 0 or ACCESS_HOLE_Y + r > p.height:
            warnings.append(WarningMsg("warn", "ACCESS_HOLE_OUTSIDE",
                                       "The access hole crosses the edge of the Right panel.",
                                       "Increase depth/height or disable the access hole."))

    for placed in drawing:
        panel = placed.panel
        for side in SIDES:
            if panel.edges.role(side) != EdgeRole.PLAIN and not panel.plan(side).feasible:
                warnings.append(WarningMsg("warn", "EDGE_NO_JOINERY",
                                           f"{panel.name}.{side}: no room for tabs, the edge is cut plain.",
                                           "Reduce the tab width or enlarge the box."))
        # Ears are unioned after the joinery, so an ear overlapping a slot fills part of it back in.
        for ear in panel.features_of(FeatureKind.HINGE_EAR):
            for slot in panel.females:
                if _disc_overlaps_rect(ear.x, ear.y, ear.radius, slot.x, slot.y, slot.w, slot.h):
                    warnings.append(WarningMsg("warn", "HINGE_EAR_OVER_SLOT",
                                               f"{panel.name}: hinge ear overlaps the {slot.side} slot at "
                                               f"{fmt(slot.center)}mm; the mating tab will not seat.",
                                               "Change the tab width or height so no slot sits under the ear."))

    for problem in check_interlock(drawing):
        warnings.append(WarningMsg("error", "INTERLOCK_MISMATCH", problem,
                                   "Adjust the tab width so both edges share a pitch."))
    return warnings


def generate_model_with_warnings(params, *, kernel=None) -> Tuple[BoxDrawing, List[WarningMsg]]:
    """Convenience entrypoint for front ends: (drawing, warnings)."""
    drawing = generate_model(params, kernel=kernel)
    return drawing, collect_warnings(drawing.params, drawing)


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(
        prog="hingeboxgen",
        formatter_class=argparse.RawTextHelpFormatter,
        description=(
            "Hinged-lid box panel geometry with finger joints.\n\n"
            "Writes the six placed panels (Bottom, Lid, Front, Back, Left, Right) as JSON.\n"
        ),
    )
    ap.add_argument("--params", default=None, help="JSON file with box parameters (camelCase or snake_case keys)")
    ap.add_argument("--width", type=float, default=None, help="Box width W (mm)")
    ap.add_argument("--depth", type=float, default=None, help="Box depth D (mm)")
    ap.add_argument("--height", type=float, default=None, help="Box height H (mm)")
    ap.add_argument("--thickness", type=float, default=None, help="Material thickness T (mm)")
    ap.add_argument("--kerf", type=float, default=None, help="Laser kerf (e.g. 0.1-0.25)")
    ap.add_argument("--tab-width", type=float, default=None, help="Nominal tab width (mm)")
    ap.add_argument("--margin", type=float, default=None, help="Spacing between panels in the layout (mm)")
    ap.add_argument("--no-right-hole", action="store_true", help="Skip the access hole in the Right panel")
    ap.add_argument("--summary", action="store_true", help="Only names, placements and warnings (no outlines)")
    ap.add_argument("--indent", type=int, default=2)
    ap.add_argument("--out", default="-", help="Output path, '-' for stdout")
    ap.add_argument("-v", "--verbose", action="store_true")
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return ap.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    raw: Dict[str, Any] = {}
    if args.params:
        with open(args.params, "r", encoding="utf-8") as f:
            raw = json.load(f)
        if not isinstance(raw, dict):
            logger.error(f"{args.params}: expected a JSON object")
            return 2
    for name in ("width", "depth", "height", "thickness", "kerf", "tab_width", "margin"):
        v = getattr(args, name)
        if v is not None:
            raw[name] = v
    if args.no_right_hole:
        raw["add_right_hole"] = False

    try:
        params = validate_params(BoxParams.from_dict(raw))
    except InvalidParameterError as exc:
        logger.error(f"invalid parameter {exc}")
        return 2

    drawing, warnings = generate_model_with_warnings(params)
    for w in warnings:
        level = {"error": logging.ERROR, "warn": logging.WARNING}.get(w.severity, logging.INFO)
        logger.log(level, f"[{w.code}] {w.message}")

    payload = drawing.summary() if args.summary else drawing.to_dict()
    payload["warnings"] = [asdict(w) for w in warnings]
    text = json.dumps(payload, indent=args.indent, ensure_ascii=False)
    if args.out == "-":
        sys.stdout.write(text + "\n")
    else:
        with open(args.out, "w", encoding="utf-8") as f:
            f.write(text + "\n")
        logger.info(f"Wrote {args.out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
