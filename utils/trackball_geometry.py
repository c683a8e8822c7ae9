"""
Geometry helpers for the virtual trackball.
Ray/plane intersection and the projections that map a point on a plane onto
the trackball's circle (single axis) or hemisphere (free rotation).
"""

from dataclasses import dataclass
from math import degrees

import mathutils
from mathutils import Vector


# Reference axis the hemisphere dome is built around before rotating it onto the view normal
HEMISPHERE_UP = Vector((0.0, 0.0, 1.0))
DEFAULT_FALLBACK_DIRECTION = Vector((1.0, 0.0, 0.0))


@dataclass(frozen=True)
class Ray:
    """World space ray, usually built from the camera and a pointer position."""

    origin: Vector
    direction: Vector


def intersect_ray_with_plane(ray, plane_normal, plane_point):
    """
    Intersect a ray (treated as an infinite line) with a plane.

    Args:
        ray: Ray to intersect
        plane_normal: mathutils.Vector normal of the plane
        plane_point: mathutils.Vector any point on the plane

    Returns:
        tuple(Vector, float): intersection point and signed distance along the ray.
        When the ray is parallel to the plane the ray origin is projected onto
        the plane and the distance is 0.0.
    """
    normal = plane_normal.normalized()
    origin = ray.origin
    direction = ray.direction.normalized()

    hit = mathutils.geometry.intersect_line_plane(origin, origin + direction, plane_point, normal)
    if hit is None:
        # Parallel: keep the point on the plane instead of sending it to infinity
        offset = (origin - plane_point).dot(normal)
        return origin - normal * offset, 0.0

    return hit, (hit - origin).dot(direction)


def clamp_to_distance(center, distance, point, fallback_direction=None):
    """
    Place a point at exactly `distance` from `center`, along the direction from
    center to point.

    If the point coincides with the center the direction is undefined and
    `fallback_direction` (or +X) is used instead.
    """
    offset = point - center
    if offset.length <= 1e-12:
        direction = fallback_direction if fallback_direction is not None else DEFAULT_FALLBACK_DIRECTION
        if direction.length <= 1e-12:
            direction = DEFAULT_FALLBACK_DIRECTION
        offset = direction
    return center + offset.normalized() * distance


def project_onto_axis_circle(center, axis_normal, radius, point, fallback_direction=None):
    """
    Project a point onto the circle of `radius` around `center` lying in the
    plane perpendicular to `axis_normal`.
    """
    axis_normal = axis_normal.normalized()

    distance = (point - center).dot(axis_normal)
    projected = point - axis_normal * distance

    if fallback_direction is None:
        fallback_direction = axis_normal.orthogonal()
    return clamp_to_distance(center, radius, projected, fallback_direction)


def project_onto_hemisphere(center, normal, radius, point):
    """
    Map a point on the plane through `center` onto a hemisphere of `radius`
    whose dome faces along `normal`.

    Points inside the dome's footprint are lifted onto the surface, points
    outside are pulled onto the rim so the mapping saturates smoothly at the
    silhouette.

    Args:
        center: mathutils.Vector hemisphere center (the pivot)
        normal: mathutils.Vector direction the dome faces (towards the viewer)
        radius: float hemisphere radius, must be positive
        point: mathutils.Vector point to project, normally on the plane

    Returns:
        mathutils.Vector: point on the hemisphere surface
    """
    normal = normal.normalized()
    to_flat = normal.rotation_difference(HEMISPHERE_UP).normalized()
    from_flat = HEMISPHERE_UP.rotation_difference(normal).normalized()

    unit = (to_flat @ (point - center)) / radius

    # Callers pass points on the plane, so unit.z is zero and this is the in-plane length
    if unit.length > 1.0:
        rim = Vector((unit.x, unit.y, 0.0))
        if rim.length <= 1e-12:
            # Purely along the normal, nothing in the plane to pick a rim point from
            return center + normal * radius
        return from_flat @ (rim.normalized() * radius) + center

    height = max(0.0, 1.0 - unit.x ** 2 - unit.y ** 2) ** 0.5
    dome = Vector((unit.x, unit.y, height))
    return from_flat @ (dome * radius) + center


def signed_angle(start, end, axis):
    """
    Angle in degrees from `start` to `end`, signed by the right-hand rule
    around `axis`. Zero-length inputs give 0.0.
    """
    angle = degrees(start.angle(end, 0.0))
    if start.cross(end).dot(axis) < 0.0:
        return -angle
    return angle
