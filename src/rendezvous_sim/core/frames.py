from __future__ import annotations

import math
from typing import Tuple

from rendezvous_sim.core.constants import ZERO_TOLERANCE

Vector3 = Tuple[float, float, float]

ZERO_VECTOR: Vector3 = (0.0, 0.0, 0.0)


def rot3(angle_rad: float, v: Vector3) -> Vector3:
    c = math.cos(angle_rad)
    s = math.sin(angle_rad)
    x, y, z = v
    return (c * x - s * y, s * x + c * y, z)


def rot1(angle_rad: float, v: Vector3) -> Vector3:
    c = math.cos(angle_rad)
    s = math.sin(angle_rad)
    x, y, z = v
    return (x, c * y - s * z, s * y + c * z)


def dot(a: Vector3, b: Vector3) -> float:
    return a[0]*b[0] + a[1]*b[1] + a[2]*b[2]


def add(a: Vector3, b: Vector3) -> Vector3:
    return (a[0]+b[0], a[1]+b[1], a[2]+b[2])


def sub(a: Vector3, b: Vector3) -> Vector3:
    return (a[0]-b[0], a[1]-b[1], a[2]-b[2])


def scale(k: float, a: Vector3) -> Vector3:
    return (k*a[0], k*a[1], k*a[2])


def cross(a: Vector3, b: Vector3) -> Vector3:
    return (
        a[1]*b[2] - a[2]*b[1],
        a[2]*b[0] - a[0]*b[2],
        a[0]*b[1] - a[1]*b[0],
    )


def sqr_norm(a: Vector3) -> float:
    return dot(a, a)


def norm(a: Vector3) -> float:
    return math.sqrt(dot(a, a))


def normalize(a: Vector3) -> Vector3:
    """
    Unit vector along a. A (near) zero vector normalizes to the zero vector
    instead of raising, so degenerate geometry degrades to zero-length results.
    """
    n = norm(a)
    if n <= ZERO_TOLERANCE:
        return ZERO_VECTOR
    return (a[0]/n, a[1]/n, a[2]/n)


def exclude(axis: Vector3, v: Vector3) -> Vector3:
    """Component of v perpendicular to axis."""
    axis_sq = sqr_norm(axis)
    if axis_sq <= ZERO_TOLERANCE:
        return v
    return sub(v, scale(dot(v, axis) / axis_sq, axis))


def angle_deg(a: Vector3, b: Vector3) -> float:
    """Unsigned angle between two vectors in degrees, [0, 180]. Zero if either is zero."""
    if norm(a) <= ZERO_TOLERANCE or norm(b) <= ZERO_TOLERANCE:
        return 0.0
    # atan2 keeps full precision near 0 and 180 where acos does not
    return math.degrees(math.atan2(norm(cross(a, b)), dot(a, b)))


def signed_angle_rad(a: Vector3, b: Vector3, axis: Vector3) -> float:
    """
    Angle from a to b measured counterclockwise about axis, wrapped to [0, 2π).
    """
    y = dot(cross(a, b), normalize(axis))
    x = dot(a, b)
    return math.atan2(y, x) % (2.0 * math.pi)


def swap_yz(v: Vector3) -> Vector3:
    """Exchange the y and z axes (orbit frame <-> body frame for positions)."""
    return (v[0], v[2], v[1])


def to_body_frame(v: Vector3) -> Vector3:
    """
    Map an axial vector (orbit normal, spin axis) from the orbit frame into the
    rotating-body frame.

    The body frame is the host's mirrored world frame: positions map by swapping
    y and z, which is a reflection, so axial vectors pick up an extra sign.
    This is the only place where the two conventions meet.
    """
    x, y, z = swap_yz(v)
    return (-x, -y, -z)


def geodetic_to_cartesian(lat_rad: float, lon_rad: float, r: float) -> Vector3:
    """
    Spherical body approximation: latitude/longitude on a sphere of radius r,
    +z through the north pole, longitude zero along +x.
    """
    clat = math.cos(lat_rad)
    slat = math.sin(lat_rad)
    clon = math.cos(lon_rad)
    slon = math.sin(lon_rad)

    x = r * clat * clon
    y = r * clat * slon
    z = r * slat
    return (x, y, z)


def cartesian_to_latlon_deg(r_vec: Vector3) -> tuple[float, float]:
    """
    Spherical body approximation: cartesian -> geocentric lat/lon (deg)
    Returns lon wrapped to [-180, 180).
    """
    x, y, z = r_vec
    r = math.sqrt(x*x + y*y + z*z)
    if r == 0:
        raise ValueError("Zero position vector.")
    lat = math.degrees(math.asin(z / r))
    lon = math.degrees(math.atan2(y, x))
    lon = ((lon + 180.0) % 360.0) - 180.0
    return lat, lon


def perifocal_to_inertial(r_pqw: Vector3, v_pqw: Vector3, raan_rad: float, inc_rad: float, argp_rad: float) -> Tuple[Vector3, Vector3]:
    """
    Convert position and velocity from the perifocal (PQW) frame to the
    parent body's inertial frame.

    Args:
        r_pqw: Position vector in PQW frame
        v_pqw: Velocity vector in PQW frame
        raan_rad: Longitude of ascending node (radians)
        inc_rad: Inclination (radians)
        argp_rad: Argument of periapsis (radians)

    Returns:
        (r, v): Position and velocity in the inertial frame
    """
    # R3(raan) * R1(inc) * R3(argp): argument of periapsis is applied first
    r_temp = rot3(argp_rad, r_pqw)
    v_temp = rot3(argp_rad, v_pqw)

    r_temp = rot1(inc_rad, r_temp)
    v_temp = rot1(inc_rad, v_temp)

    r_out = rot3(raan_rad, r_temp)
    v_out = rot3(raan_rad, v_temp)

    return r_out, v_out
