"""
Rendezvous geometry between an origin orbit and a target orbit.

Includes:
- Relative inclination and phase angle
- Intercept (lead) angle heuristic
- Ascending/descending node directions
- Time for a surface site to rotate under a target plane
- Linearised closing kinematics

Every function here is pure: it reads orbit/body snapshots and returns
numbers. Degenerate geometry yields clamped values or None, never an
exception.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Tuple

from rendezvous_sim.core.constants import PARALLEL_TOLERANCE, ZERO_TOLERANCE
from rendezvous_sim.core.frames import (
    ZERO_VECTOR,
    Vector3,
    add,
    angle_deg,
    cross,
    dot,
    exclude,
    norm,
    normalize,
    scale,
    signed_angle_rad,
    sqr_norm,
    sub,
    to_body_frame,
)
from rendezvous_sim.objects.celestial_body import RotatingBodyState
from rendezvous_sim.physics.kepler import clamp_360
from rendezvous_sim.physics.orbit import OrbitState


@dataclass(frozen=True)
class ClosingKinematics:
    """Relative motion of the target with respect to the origin."""
    distance: float
    relative_velocity: float
    time_to_rendezvous: Optional[float]  # None when relative velocity is zero
    relative_radial_velocity: Optional[float]  # None when the positions coincide


def relative_inclination(a: OrbitState, b: OrbitState) -> float:
    """Angle between the two orbit normals in degrees, [0, 180]."""
    return angle_deg(a.normal, b.normal)


def phase_angle(origin: OrbitState, target: OrbitState) -> float:
    """
    Angle from the origin position to the target position, both taken in the
    origin's orbital plane and measured in the origin's direction of travel.

    Returns:
        Degrees in [0, 360). Zero if the target sits on the origin's orbit axis.
    """
    projected = exclude(origin.normal, target.position)
    if norm(projected) <= ZERO_TOLERANCE:
        return 0.0
    return clamp_360(math.degrees(signed_angle_rad(origin.position, projected, origin.normal)))


def mean_radius(orbit: OrbitState) -> float:
    """Mean of the semi-axes; stands in for the radius of a near-circular orbit."""
    return (orbit.semi_minor_axis + orbit.semi_major_axis) * 0.5


def intercept_angle(origin: OrbitState, target: OrbitState,
                    phase_angle_deg: float, relative_inclination_deg: float) -> float:
    """
    Difference between the current phase angle and the phase angle at which a
    Hohmann-like transfer from origin would meet target.

    Returns:
        Degrees in [0, 360)
    """
    origin_radius = mean_radius(origin)
    target_radius = mean_radius(target)
    angle = 180.0 * (1.0 - math.pow((origin_radius + target_radius) / (2.0 * target_radius), 1.5))
    angle = phase_angle_deg - angle

    if relative_inclination_deg < 90.0:
        return clamp_360(angle)
    # Counter-rotating: the transfer runs the other way round
    return clamp_360(360.0 - (180.0 - angle))


def ascending_node(target: OrbitState, origin: OrbitState) -> Vector3:
    """Direction in which the origin rises through the target's plane."""
    return cross(target.normal, origin.normal)


def descending_node(target: OrbitState, origin: OrbitState) -> Vector3:
    return cross(origin.normal, target.normal)


def swapped_orbit_normal(orbit: OrbitState) -> Vector3:
    """Unit orbit normal expressed in the rotating-body frame."""
    return normalize(to_body_frame(orbit.normal))


def _rotation_angle_to(surface: Vector3, point: Vector3, angular_velocity: Vector3) -> float:
    angle = abs(angle_deg(surface, point))
    if dot(cross(surface, point), angular_velocity) < 0:
        angle = 360.0 - angle
    return angle


def plane_crossing_points(body: RotatingBodyState, latitude_deg: float,
                          target: OrbitState) -> Tuple[Vector3, Vector3]:
    """
    Equatorial projections of the two points where a circle of latitude meets
    the target's orbital plane, in the body frame.

    When the latitude is too high for the circle to reach the plane, both
    points collapse onto the point of closest approach. For a plane lying in
    the equator both are the zero vector.
    """
    omega = body.angular_velocity
    normal = swapped_orbit_normal(target)

    inc = abs(angle_deg(normal, omega))
    if abs(math.sin(math.radians(inc))) < PARALLEL_TOLERANCE:
        return ZERO_VECTOR, ZERO_VECTOR

    lat_rad = math.radians(latitude_deg)

    # b: where the plane crosses the latitude circle's own plane, seen from the axis
    b = normalize(exclude(omega, normal))
    b = scale(body.radius * math.sin(lat_rad) / math.tan(math.radians(inc)), b)

    c = normalize(cross(normal, omega))
    c_magnitude_sq = (body.radius * math.cos(lat_rad)) ** 2 - sqr_norm(b)
    if c_magnitude_sq < 0:
        c_magnitude_sq = 0.0
    c = scale(math.sqrt(c_magnitude_sq), c)

    return add(b, c), sub(b, c)


def time_to_plane(body: RotatingBodyState, latitude_deg: float, longitude_deg: float,
                  target: OrbitState) -> float:
    """
    Time for a site on a rotating body to rotate under the target's orbital plane.

    If the site is too far from the equator to ever pass under the plane,
    returns the time to its closest approach to the plane instead.

    Args:
        body: Rotating body the site sits on
        latitude_deg: Site latitude (degrees)
        longitude_deg: Site longitude (degrees)
        target: Target orbit (its parent must be the same body)

    Returns:
        Seconds in [0, body.rotation_period)
    """
    a1, a2 = plane_crossing_points(body, latitude_deg, target)
    if sqr_norm(a1) <= ZERO_TOLERANCE and sqr_norm(a2) <= ZERO_TOLERANCE:
        # Equatorial plane: the site's distance to it never changes
        return 0.0

    longitude_vector = body.surface_vector(0.0, longitude_deg)

    angle1 = _rotation_angle_to(longitude_vector, a1, body.angular_velocity)
    angle2 = _rotation_angle_to(longitude_vector, a2, body.angular_velocity)

    angle = min(angle1, angle2)
    return (angle / 360.0) * body.rotation_period


def closing_kinematics(origin: OrbitState, target: OrbitState) -> ClosingKinematics:
    """
    Straight-line closing estimate between origin and target.

    The time to rendezvous is when the linear extrapolation of the relative
    motion reaches minimum separation; negative means that moment has passed.
    Radial velocity is positive when separating.
    """
    x = sub(target.position, origin.position)
    v = sub(target.velocity, origin.velocity)
    xv = dot(x, v)

    distance = norm(x)
    v_sq = sqr_norm(v)

    time_to_rendezvous = -xv / v_sq if v_sq > ZERO_TOLERANCE else None
    radial_velocity = xv / distance if distance > ZERO_TOLERANCE else None

    return ClosingKinematics(
        distance=distance,
        relative_velocity=math.sqrt(v_sq),
        time_to_rendezvous=time_to_rendezvous,
        relative_radial_velocity=radial_velocity,
    )
