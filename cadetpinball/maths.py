"""Two-dimensional geometry used by the table physics: rectangles, rays,
lines, circles and simple ball collisions."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional, Sequence

NO_INTERSECTION = 1_000_000_000.0
"""Distance reported when a ray does not hit anything."""


@dataclass
class Vector:
    """A mutable 3D vector; most routines only use X and Y."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def copy(self) -> "Vector":
        return Vector(self.x, self.y, self.z)


@dataclass
class Rectangle:
    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0


@dataclass
class Circle:
    center: Vector = field(default_factory=Vector)
    radius_sq: float = 0.0


@dataclass
class Ray:
    origin: Vector = field(default_factory=Vector)
    direction: Vector = field(default_factory=Vector)
    max_distance: float = 0.0
    min_distance: float = 0.0
    time_now: float = 0.0
    time_delta: float = 0.0
    field_flag: int = 0


@dataclass
class Line:
    """A line segment prepared for ray intersection by :func:`line_init`."""

    perpendicular_l: Vector = field(default_factory=Vector)
    direction: Vector = field(default_factory=Vector)
    pre_comp1: float = 0.0
    origin_x: float = 0.0
    origin_y: float = 0.0
    ray_intersect: Vector = field(default_factory=Vector)


@dataclass
class WallPoint:
    x0: float = 0.0
    y0: float = 0.0
    x1: float = 0.0
    y1: float = 0.0


@dataclass
class RampPlane:
    ball_collision_offset: Vector = field(default_factory=Vector)
    v1: Vector = field(default_factory=Vector)
    v2: Vector = field(default_factory=Vector)
    v3: Vector = field(default_factory=Vector)
    gravity_angle1: float = 0.0
    gravity_angle2: float = 0.0
    field_force: Vector = field(default_factory=Vector)


@dataclass
class MovingBody:
    """Anything with a position, a unit direction of travel and a speed."""

    position: Vector = field(default_factory=Vector)
    acceleration: Vector = field(default_factory=Vector)
    speed: float = 0.0


def enclosing_box(rect1: Rectangle, rect2: Rectangle) -> Rectangle:
    """Return the smallest rectangle containing both rectangles."""
    x, y = rect1.x, rect1.y
    width, height = rect1.width, rect1.height
    if rect2.x < x:
        width += x - rect2.x
        x = rect2.x
    if rect2.y < y:
        height += y - rect2.y
        y = rect2.y
    if rect2.width + rect2.x > x + width:
        width = rect2.x + rect2.width - x
    if rect2.height + rect2.y > height + y:
        height = rect2.y + rect2.height - y
    return Rectangle(x, y, width, height)


def rectangle_clip(rect1: Rectangle, rect2: Rectangle) -> Optional[Rectangle]:
    """Clip ``rect1`` by ``rect2``; return None when nothing is left."""
    x, y = rect1.x, rect1.y
    width, height = rect1.width, rect1.height
    right2 = rect2.x + rect2.width
    bottom2 = rect2.y + rect2.height
    if x + width < rect2.x or x >= right2:
        return None
    if y + height < rect2.y or y >= bottom2:
        return None
    if x < rect2.x:
        width += x - rect2.x
        x = rect2.x
    if x + width > right2:
        width = right2 - x
    if y < rect2.y:
        height += y - rect2.y
        y = rect2.y
    if height + y > bottom2:
        height = bottom2 - y
    if not width or not height:
        return None
    return Rectangle(x, y, width, height)


def overlapping_box(rect1: Rectangle, rect2: Rectangle) -> tuple[bool, Rectangle]:
    """Return whether the rectangles overlap, and the box spanning them."""
    if rect1.x >= rect2.x:
        box_x = rect2.x
        width = rect1.width - rect2.x + rect1.x + 1
    else:
        box_x = rect1.x
        width = rect2.width - rect1.x + rect2.x + 1
    if rect1.y >= rect2.y:
        box_y = rect2.y
        height = rect1.height - rect2.y + rect1.y + 1
    else:
        box_y = rect1.y
        height = rect2.height - rect1.y + rect2.y + 1
    box = Rectangle(box_x, box_y, width, height)
    overlaps = width <= rect2.width + rect1.width and height <= rect2.height + rect1.height
    return overlaps, box


def ray_intersect_circle(ray: Ray, circle: Circle) -> float:
    """Distance along the ray to the circle, or NO_INTERSECTION."""
    lx = circle.center.x - ray.origin.x
    ly = circle.center.y - ray.origin.y
    tca = ly * ray.direction.y + lx * ray.direction.x
    if tca < 0.0:
        return NO_INTERSECTION
    l_mag_sq = ly * ly + lx * lx
    if l_mag_sq < circle.radius_sq:
        return tca - math.sqrt(circle.radius_sq - l_mag_sq + tca * tca)
    thc_sq = circle.radius_sq - l_mag_sq + tca * tca
    if thc_sq < 0.0:
        return NO_INTERSECTION
    t0 = tca - math.sqrt(thc_sq)
    if t0 < 0.0 or t0 > ray.max_distance:
        return NO_INTERSECTION
    return t0


def normalize_2d(vec: Vector) -> float:
    """Normalise X and Y of ``vec`` in place and return the former length."""
    mag = math.sqrt(vec.x * vec.x + vec.y * vec.y)
    if mag != 0.0:
        vec.x = 1.0 / mag * vec.x
        vec.y = 1.0 / mag * vec.y
    return mag


def line_init(x0: float, y0: float, x1: float, y1: float) -> Line:
    """Build a line from (x0, y0) to (x1, y1)."""
    line = Line()
    line.direction = Vector(x1 - x0, y1 - y0)
    normalize_2d(line.direction)
    line.perpendicular_l = Vector(line.direction.y, -line.direction.x)
    line.pre_comp1 = -(line.direction.y * x0) + line.direction.x * y0
    if line.direction.x >= 1e-9 or line.direction.x <= -1e-9:
        end, start, reversed_ = x1, x0, x0 >= x1
    else:
        line.direction.x = 0.0
        end, start, reversed_ = y1, y0, y0 >= y1
    if reversed_:
        line.origin_x, line.origin_y = end, start
    else:
        line.origin_x, line.origin_y = start, end
    return line


def ray_intersect_line(ray: Ray, line: Line) -> float:
    """Distance along the ray to the line segment, or NO_INTERSECTION.

    The hit point is stored in ``line.ray_intersect``.
    """
    perp_dot = line.perpendicular_l.y * ray.direction.y + ray.direction.x * line.perpendicular_l.x
    if perp_dot >= 0.0:
        return NO_INTERSECTION
    result = -(
        (ray.origin.x * line.perpendicular_l.x + ray.origin.y * line.perpendicular_l.y + line.pre_comp1)
        / perp_dot
    )
    if not (-ray.min_distance <= result <= ray.max_distance):
        return NO_INTERSECTION
    line.ray_intersect.x = result * ray.direction.x + ray.origin.x
    hit_y = result * ray.direction.y + ray.origin.y
    line.ray_intersect.y = hit_y
    if line.direction.x == 0.0:
        if hit_y >= line.origin_x:
            return result if hit_y <= line.origin_y else NO_INTERSECTION
    elif line.origin_x <= line.ray_intersect.x:
        return result if line.ray_intersect.x <= line.origin_y else NO_INTERSECTION
    return NO_INTERSECTION


def cross(vec1: Vector, vec2: Vector) -> Vector:
    return Vector(
        vec2.z * vec1.y - vec2.y * vec1.z,
        vec2.x * vec1.z - vec1.x * vec2.z,
        vec1.x * vec2.y - vec2.x * vec1.y,
    )


def magnitude(vec: Vector) -> float:
    mag_sq = vec.x * vec.x + vec.y * vec.y + vec.z * vec.z
    return 0.0 if mag_sq == 0.0 else math.sqrt(mag_sq)


def vector_add(vec1: Vector, vec2: Vector) -> None:
    """Add the X and Y of ``vec2`` to ``vec1`` in place."""
    vec1.x += vec2.x
    vec1.y += vec2.y


def basic_collision(
    ball: MovingBody,
    next_position: Vector,
    direction: Vector,
    elasticity: float,
    smoothness: float,
    threshold: float,
    boost: float,
) -> float:
    """Bounce ``ball`` off a surface with normal ``direction``.

    Returns the speed component along the normal.
    """
    ball.position.x = next_position.x
    ball.position.y = next_position.y
    proj = -(direction.y * ball.acceleration.y + direction.x * ball.acceleration.x)
    if proj < 0:
        proj = -proj
    else:
        dx1 = proj * direction.x
        dy1 = proj * direction.y
        ball.acceleration.x = (dx1 + ball.acceleration.x) * smoothness + dx1 * elasticity
        ball.acceleration.y = (dy1 + ball.acceleration.y) * smoothness + dy1 * elasticity
        normalize_2d(ball.acceleration)
    proj_speed = proj * ball.speed
    new_speed = ball.speed - (1.0 - elasticity) * proj_speed
    ball.speed = new_speed
    if proj_speed >= threshold:
        ball.acceleration.x = new_speed * ball.acceleration.x + direction.x * boost
        ball.acceleration.y = new_speed * ball.acceleration.y + direction.y * boost
        ball.speed = normalize_2d(ball.acceleration)
    return proj_speed


def distance_squared(vec1: Vector, vec2: Vector) -> float:
    return (vec1.y - vec2.y) * (vec1.y - vec2.y) + (vec1.x - vec2.x) * (vec1.x - vec2.x)


def dot_product(vec1: Vector, vec2: Vector) -> float:
    return vec1.y * vec2.y + vec1.x * vec2.x


def distance(vec1: Vector, vec2: Vector) -> float:
    dx = vec1.x - vec2.x
    dy = vec1.y - vec2.y
    return math.sqrt(dy * dy + dx * dx)


def sin_cos(angle: float) -> tuple[float, float]:
    return math.sin(angle), math.cos(angle)


def rotate_pt(point: Vector, sin: float, cos: float, origin: Vector) -> None:
    """Rotate ``point`` about ``origin`` in place."""
    dir_x = point.x - origin.x
    dir_y = point.y - origin.y
    point.x = dir_x * cos - dir_y * sin + origin.x
    point.y = dir_x * sin + dir_y * cos + origin.y


def distance_to_flipper(
    ray1: Ray,
    ray2: Optional[Ray],
    line_a: Line,
    line_b: Line,
    circle_base: Circle,
    circle_t1: Circle,
) -> float:
    """Nearest hit of ``ray1`` on a flipper made of two lines and two circles.

    When ``ray2`` is given and something is hit, it receives the hit point
    as origin and the surface normal as direction.
    """
    dist = NO_INTERSECTION
    kind = -1
    new_dist = ray_intersect_line(ray1, line_a)
    if new_dist < NO_INTERSECTION:
        dist, kind = new_dist, 0
    new_dist = ray_intersect_circle(ray1, circle_base)
    if new_dist < dist:
        dist, kind = new_dist, 2
    new_dist = ray_intersect_circle(ray1, circle_t1)
    if new_dist < dist:
        dist, kind = new_dist, 3
    new_dist = ray_intersect_line(ray1, line_b)
    if new_dist < dist:
        dist, kind = new_dist, 1
    if ray2 is None or dist >= NO_INTERSECTION:
        return dist
    if kind == -1:
        return NO_INTERSECTION

    if kind in (2, 3):
        ray2.origin.x = dist * ray1.direction.x + ray1.origin.x
        ray2.origin.y = dist * ray1.direction.y + ray1.origin.y
        center = circle_base.center if kind == 2 else circle_t1.center
        ray2.direction.x = ray2.origin.x - center.x
        ray2.direction.y = ray2.origin.y - center.y
        normalize_2d(ray2.direction)
        return dist

    line = line_a if kind == 0 else line_b
    ray2.direction = line.perpendicular_l.copy()
    ray2.origin = line.ray_intersect.copy()
    return dist


def rotate_vector(vec: Vector, angle: float) -> None:
    """Rotate ``vec`` in place.

    The Y update deliberately uses the already rotated X, as the game's
    physics has always done.
    """
    s, c = math.sin(angle), math.cos(angle)
    vec.x = c * vec.x - s * vec.y
    vec.y = s * vec.x + c * vec.y


def find_closest_edge(
    planes: Sequence[RampPlane], wall: WallPoint
) -> Optional[tuple[Vector, Vector]]:
    """Find the plane edge closest to the wall.

    Returns ``(line_end, line_start)`` as the plane's own vertex vectors,
    or None when there are no planes.
    """
    wall_start = Vector(wall.x0, wall.y0)
    wall_end = Vector(wall.x1, wall.y1)
    best = NO_INTERSECTION
    found: Optional[tuple[Vector, Vector]] = None
    for plane in planes:
        for first, second in ((plane.v1, plane.v2), (plane.v2, plane.v3), (plane.v3, plane.v1)):
            dist = distance(wall_start, first) + distance(wall_end, second)
            if dist < best:
                best = dist
                found = (first, second)
    return found