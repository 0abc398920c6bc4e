"""Vector path model (M/L/C/Q/Z) and Bézier geometry queries.

Paths are immutable: every helper returns a new `PathData`. Coordinates are
plain canvas units. A `C`/`Q` point that lost its control point(s) is still a
valid point; it is rendered as a straight `L` segment instead of failing.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Callable, Optional, Sequence

from lienzo.geom.primitives import Bounds, Point, PointLike, as_point
from lienzo.utils.errors import LienzoSchemaError

# 4/3 * (sqrt(2) - 1): tangente continua en las 4 esquinas de la elipse.
ELLIPSE_KAPPA = 0.5522847498


class PointType(str, Enum):
    MOVE = "M"
    LINE = "L"
    CUBIC = "C"
    QUAD = "Q"
    CLOSE = "Z"


HANDLE_MODES = ("smooth", "corner", "symmetric")


@dataclass(frozen=True)
class PathPoint:
    type: PointType
    x: float = 0.0
    y: float = 0.0
    cp1: Optional[Point] = None
    cp2: Optional[Point] = None
    handle_mode: Optional[str] = None

    @property
    def is_close(self) -> bool:
        return self.type is PointType.CLOSE

    @property
    def anchor(self) -> Optional[Point]:
        if self.is_close:
            return None
        return Point(self.x, self.y)

    def coords(self) -> list[Point]:
        """Anchor + control points (los que existan). Vacío para Z."""
        if self.is_close:
            return []
        out = [Point(self.x, self.y)]
        if self.cp1 is not None:
            out.append(self.cp1)
        if self.cp2 is not None:
            out.append(self.cp2)
        return out

    def mapped(self, fn: Callable[[float, float], Point]) -> "PathPoint":
        """Aplica `fn` al anchor y a los puntos de control. Z queda igual."""
        if self.is_close:
            return self
        p = fn(self.x, self.y)
        return replace(
            self,
            x=p.x,
            y=p.y,
            cp1=fn(self.cp1.x, self.cp1.y) if self.cp1 is not None else None,
            cp2=fn(self.cp2.x, self.cp2.y) if self.cp2 is not None else None,
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"type": self.type.value}
        if not self.is_close:
            d["x"] = float(self.x)
            d["y"] = float(self.y)
        if self.cp1 is not None:
            d["cp1"] = {"x": float(self.cp1.x), "y": float(self.cp1.y)}
        if self.cp2 is not None:
            d["cp2"] = {"x": float(self.cp2.x), "y": float(self.cp2.y)}
        if self.handle_mode:
            d["handleMode"] = self.handle_mode
        return d

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "PathPoint":
        if not isinstance(d, dict):
            raise LienzoSchemaError("PathPoint inválido: se esperaba dict")
        try:
            ptype = PointType(str(d.get("type", "")).upper())
        except ValueError as e:
            raise LienzoSchemaError(f"PathPoint.type inválido: {d.get('type')!r}") from e
        if ptype is PointType.CLOSE:
            return close_point()
        handle_mode = d.get("handleMode")
        if handle_mode not in HANDLE_MODES:
            handle_mode = None
        return PathPoint(
            type=ptype,
            x=_as_float(d.get("x", 0.0), "path.x"),
            y=_as_float(d.get("y", 0.0), "path.y"),
            cp1=_as_opt_point(d.get("cp1"), "path.cp1"),
            cp2=_as_opt_point(d.get("cp2"), "path.cp2"),
            handle_mode=handle_mode,
        )


@dataclass(frozen=True)
class PathData:
    points: tuple[PathPoint, ...] = field(default_factory=tuple)
    closed: bool = False

    @property
    def d(self) -> str:
        """Atributo `d` de SVG (se recalcula, no se cachea)."""
        return to_path_string(self)

    def to_dict(self) -> dict[str, Any]:
        return {
            "points": [p.to_dict() for p in self.points],
            "closed": bool(self.closed),
            "d": self.d,
        }

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "PathData":
        if not isinstance(d, dict):
            raise LienzoSchemaError("PathData inválido: se esperaba dict")
        raw = d.get("points", [])
        if not isinstance(raw, list):
            raise LienzoSchemaError("PathData.points inválido: se esperaba lista")
        # `d` cacheado se ignora: siempre se regenera desde los puntos.
        return make_path([PathPoint.from_dict(p) for p in raw], closed=bool(d.get("closed", False)))


# ----------------------------
# Constructores de puntos
# ----------------------------

def move_to(x: float, y: float) -> PathPoint:
    return PathPoint(PointType.MOVE, float(x), float(y))


def line_to(x: float, y: float) -> PathPoint:
    return PathPoint(PointType.LINE, float(x), float(y))


def curve_to(
    x: float,
    y: float,
    cp1: PointLike,
    cp2: PointLike,
    handle_mode: str = "smooth",
) -> PathPoint:
    return PathPoint(PointType.CUBIC, float(x), float(y), as_point(cp1), as_point(cp2), handle_mode)


def quad_to(x: float, y: float, cp: PointLike) -> PathPoint:
    return PathPoint(PointType.QUAD, float(x), float(y), as_point(cp))


def close_point() -> PathPoint:
    return PathPoint(PointType.CLOSE)


# ----------------------------
# Construcción de paths
# ----------------------------

def make_path(points: Sequence[PathPoint], closed: bool = False) -> PathData:
    """Arma un PathData garantizando que el primer punto sea M.

    Los Z al principio no tienen anchor que promover: se descartan.
    """
    pts = list(points)
    while pts and pts[0].is_close:
        pts.pop(0)
    if pts and pts[0].type is not PointType.MOVE:
        pts[0] = replace(pts[0], type=PointType.MOVE, cp1=None, cp2=None)
    return PathData(points=tuple(pts), closed=bool(closed))


def create_path(x: float, y: float) -> PathData:
    return make_path([move_to(x, y)])


def create_line_path(x1: float, y1: float, x2: float, y2: float) -> PathData:
    return make_path([move_to(x1, y1), line_to(x2, y2)])


def create_rectangle_path(x: float, y: float, width: float, height: float) -> PathData:
    return make_path(
        [
            move_to(x, y),
            line_to(x + width, y),
            line_to(x + width, y + height),
            line_to(x, y + height),
            close_point(),
        ],
        closed=True,
    )


def create_ellipse_path(cx: float, cy: float, rx: float, ry: float) -> PathData:
    """Elipse con 4 cúbicas (arriba -> derecha -> abajo -> izquierda -> arriba)."""
    kx = ELLIPSE_KAPPA * rx
    ky = ELLIPSE_KAPPA * ry
    return make_path(
        [
            move_to(cx, cy - ry),
            curve_to(cx + rx, cy, (cx + kx, cy - ry), (cx + rx, cy - ky)),
            curve_to(cx, cy + ry, (cx + rx, cy + ky), (cx + kx, cy + ry)),
            curve_to(cx - rx, cy, (cx - kx, cy + ry), (cx - rx, cy + ky)),
            curve_to(cx, cy - ry, (cx - rx, cy - ky), (cx - kx, cy - ry)),
            close_point(),
        ],
        closed=True,
    )


def append_point(path: PathData, point: PathPoint) -> PathData:
    return make_path([*path.points, point], closed=path.closed)


def line_to_path(path: PathData, x: float, y: float) -> PathData:
    return append_point(path, line_to(x, y))


def curve_to_path(path: PathData, x: float, y: float, cp1: PointLike, cp2: PointLike) -> PathData:
    return append_point(path, curve_to(x, y, cp1, cp2))


def quad_to_path(path: PathData, x: float, y: float, cp: PointLike) -> PathData:
    return append_point(path, quad_to(x, y, cp))


def close_path(path: PathData) -> PathData:
    """Agrega Z y marca el path como cerrado."""
    if path.points and path.points[-1].is_close:
        return replace(path, closed=True)
    return make_path([*path.points, close_point()], closed=True)


def update_point(path: PathData, index: int, **changes: Any) -> PathData:
    pts = list(path.points)
    pts[index] = replace(pts[index], **changes)
    return make_path(pts, closed=path.closed)


def insert_point(path: PathData, index: int, point: PathPoint) -> PathData:
    pts = list(path.points)
    pts.insert(index, point)
    return make_path(pts, closed=path.closed)


def remove_point(path: PathData, index: int) -> PathData:
    """Quita un punto; si era el M inicial, el siguiente pasa a ser M."""
    pts = [p for i, p in enumerate(path.points) if i != index]
    return make_path(pts, closed=path.closed)


def close_path_data(path: PathData) -> PathData:
    if path.closed:
        return path
    return replace(path, closed=True)


def open_path_data(path: PathData) -> PathData:
    if not path.closed:
        return path
    return make_path([p for p in path.points if not p.is_close], closed=False)


def get_point(path: PathData, index: int) -> Optional[PathPoint]:
    n = len(path.points)
    if index < 0:
        index = n + index
    if 0 <= index < n:
        return path.points[index]
    return None


def first_anchor(path: PathData) -> Optional[Point]:
    for p in path.points:
        if p.type is PointType.MOVE:
            return Point(p.x, p.y)
    return None


def last_anchor(path: PathData) -> Optional[Point]:
    for p in reversed(path.points):
        if not p.is_close:
            return Point(p.x, p.y)
    return None


# ----------------------------
# Render a string `d`
# ----------------------------

def to_path_string(path: PathData) -> str:
    """Mini-lenguaje de path SVG, tokens separados por espacio."""
    if not path.points:
        return ""

    parts: list[str] = []
    for p in path.points:
        t = p.type
        if t is PointType.MOVE:
            parts.append(f"M {fmt_num(p.x)} {fmt_num(p.y)}")
        elif t is PointType.LINE:
            parts.append(f"L {fmt_num(p.x)} {fmt_num(p.y)}")
        elif t is PointType.CUBIC:
            if p.cp1 is not None and p.cp2 is not None:
                parts.append(
                    f"C {fmt_num(p.cp1.x)} {fmt_num(p.cp1.y)} "
                    f"{fmt_num(p.cp2.x)} {fmt_num(p.cp2.y)} {fmt_num(p.x)} {fmt_num(p.y)}"
                )
            else:
                parts.append(f"L {fmt_num(p.x)} {fmt_num(p.y)}")
        elif t is PointType.QUAD:
            if p.cp1 is not None:
                parts.append(f"Q {fmt_num(p.cp1.x)} {fmt_num(p.cp1.y)} {fmt_num(p.x)} {fmt_num(p.y)}")
            else:
                parts.append(f"L {fmt_num(p.x)} {fmt_num(p.y)}")
        else:
            parts.append("Z")

    if path.closed and not path.points[-1].is_close:
        parts.append("Z")
    return " ".join(parts)


def fmt_num(v: float) -> str:
    """Número como lo imprime JS (`Number.prototype.toString`).

    Enteros sin `.0`; notación posicional para 1e-6 <= |v| < 1e21 y
    exponente (`1e-7`, `1.5e+21`) fuera de ese rango.
    """
    f = float(v)
    if f == 0:
        return "0"
    if f.is_integer() and abs(f) < 1e16:
        return str(int(f))
    r = repr(f)
    if "e" not in r:
        return r
    mantissa, exp = r.split("e")
    e = int(exp)
    if -7 < e < 21:
        return _positional(mantissa, e)
    return f"{mantissa}e{'+' if e > 0 else '-'}{abs(e)}"


def _positional(mantissa: str, e: int) -> str:
    # repr deja un solo dígito antes del punto en la mantisa
    sign = "-" if mantissa.startswith("-") else ""
    digits = mantissa.lstrip("-").replace(".", "")
    point = 1 + e
    if point <= 0:
        return f"{sign}0.{'0' * -point}{digits}"
    if point >= len(digits):
        return sign + digits + "0" * (point - len(digits))
    return f"{sign}{digits[:point]}.{digits[point:]}"


# ----------------------------
# Queries / transformaciones
# ----------------------------

def bounding_box(path: PathData) -> Bounds:
    """Caja por anchors Y puntos de control.

    No es la caja ajustada de la curva (eso requiere extremos de la Bézier),
    pero siempre la contiene: la curva vive en la envolvente convexa.
    """
    min_x = min_y = float("inf")
    max_x = max_y = float("-inf")
    found = False
    for p in path.points:
        for c in p.coords():
            found = True
            min_x = min(min_x, c.x)
            min_y = min(min_y, c.y)
            max_x = max(max_x, c.x)
            max_y = max(max_y, c.y)
    if not found:
        return Bounds()
    return Bounds.from_edges(min_x, min_y, max_x, max_y)


def translate_path(path: PathData, dx: float, dy: float) -> PathData:
    return _map_path(path, lambda x, y: Point(x + dx, y + dy))


def scale_path(
    path: PathData,
    sx: float,
    sy: float,
    origin: PointLike = (0.0, 0.0),
) -> PathData:
    ox, oy = as_point(origin)
    return _map_path(path, lambda x, y: Point(ox + (x - ox) * sx, oy + (y - oy) * sy))


def rotate_path(path: PathData, angle_deg: float, origin: PointLike = (0.0, 0.0)) -> PathData:
    ox, oy = as_point(origin)
    rad = math.radians(angle_deg)
    cos_a = math.cos(rad)
    sin_a = math.sin(rad)

    def _rot(x: float, y: float) -> Point:
        dx = x - ox
        dy = y - oy
        return Point(ox + dx * cos_a - dy * sin_a, oy + dx * sin_a + dy * cos_a)

    return _map_path(path, _rot)


def _map_path(path: PathData, fn: Callable[[float, float], Point]) -> PathData:
    return PathData(points=tuple(p.mapped(fn) for p in path.points), closed=path.closed)


def _as_float(value: Any, field_name: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise LienzoSchemaError(f"Campo {field_name} inválido (float): {value!r}") from e


def _as_opt_point(value: Any, field_name: str) -> Optional[Point]:
    if value is None:
        return None
    if isinstance(value, dict):
        return Point(_as_float(value.get("x"), f"{field_name}.x"), _as_float(value.get("y"), f"{field_name}.y"))
    if isinstance(value, (list, tuple)) and len(value) == 2:
        return Point(_as_float(value[0], field_name), _as_float(value[1], field_name))
    raise LienzoSchemaError(f"Campo {field_name} inválido (punto): {value!r}")
