from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Tuple

from rendezvous_sim.core.frames import (
    Vector3,
    add,
    cartesian_to_latlon_deg,
    cross,
    geodetic_to_cartesian,
    normalize,
    rot3,
    scale,
    swap_yz,
    to_body_frame,
)
from rendezvous_sim.physics.orbit import OrbitalElements, OrbitState, orbit_state_at


@dataclass(frozen=True)
class RotatingBodyState:
    """
    Spin state of a body, expressed in the rotating-body frame.

    The body frame mirrors the orbit frame (y and z swapped), so the
    angular velocity vector points out of the south pole and positive
    latitudes lie on the side opposite to it. Surface points move along
    angular_velocity x position.
    """
    radius: float
    angular_velocity: Vector3
    rotation_period: float
    zero_longitude: Vector3 = (1.0, 0.0, 0.0)

    def __post_init__(self):
        if self.radius <= 0:
            raise ValueError(f"Body radius must be positive. Got: {self.radius}")
        if self.rotation_period <= 0:
            raise ValueError(f"Rotation period must be positive. Got: {self.rotation_period}")

    @classmethod
    def from_rotation(cls, radius: float, rotation_period: float,
                      rotation_angle_rad: float = 0.0) -> "RotatingBodyState":
        """Body spinning about the orbit-frame +z axis, turned by rotation_angle_rad."""
        spin = (0.0, 0.0, 2.0 * math.pi / rotation_period)
        zero_longitude = swap_yz(rot3(rotation_angle_rad, (1.0, 0.0, 0.0)))
        return cls(
            radius=radius,
            angular_velocity=to_body_frame(spin),
            rotation_period=rotation_period,
            zero_longitude=zero_longitude,
        )

    def surface_vector(self, lat_deg: float, lon_deg: float) -> Vector3:
        """Unit vector from the body centre through a surface point."""
        spin = normalize(self.angular_velocity)
        east = normalize(cross(spin, self.zero_longitude))
        lat = math.radians(lat_deg)
        lon = math.radians(lon_deg)
        equator = add(scale(math.cos(lon), self.zero_longitude), scale(math.sin(lon), east))
        return add(scale(math.cos(lat), equator), scale(-math.sin(lat), spin))


@dataclass
class CelestialBody:
    """
    A spherical, uniformly rotating body. The root of a system has no parent
    and no orbit; every other body orbits its parent on fixed elements.
    """
    name: str
    radius: float
    mu: float
    rotation_period: float
    parent: Optional[str] = None
    elements: Optional[OrbitalElements] = None
    rotation_angle0_rad: float = 0.0

    def __post_init__(self):
        if not self.name.strip():
            raise ValueError("Body name cannot be empty or whitespace.")
        if self.radius <= 0:
            raise ValueError(f"Radius must be positive. Got: {self.radius}")
        if self.mu <= 0:
            raise ValueError(f"Gravitational parameter must be positive. Got: {self.mu}")
        if self.rotation_period <= 0:
            raise ValueError(f"Rotation period must be positive. Got: {self.rotation_period}")
        if (self.parent is None) != (self.elements is None):
            raise ValueError("A body needs both a parent and orbital elements, or neither.")

    @property
    def is_root(self) -> bool:
        return self.parent is None

    def rotation_angle_rad(self, t_s: float) -> float:
        return self.rotation_angle0_rad + 2.0 * math.pi * t_s / self.rotation_period

    def rotating_state_at(self, t_s: float) -> RotatingBodyState:
        return RotatingBodyState.from_rotation(self.radius, self.rotation_period, self.rotation_angle_rad(t_s))

    def surface_position(self, lat_deg: float, lon_deg: float, t_s: float, alt: float = 0.0) -> Vector3:
        """Inertial position of a surface site at time t_s."""
        r_fixed = geodetic_to_cartesian(math.radians(lat_deg), math.radians(lon_deg), self.radius + alt)
        return rot3(self.rotation_angle_rad(t_s), r_fixed)

    def surface_velocity(self, r: Vector3) -> Vector3:
        """Inertial velocity of a point co-rotating with the body."""
        return cross((0.0, 0.0, 2.0 * math.pi / self.rotation_period), r)

    def surface_coordinates(self, r: Vector3, t_s: float) -> Tuple[float, float]:
        """(lat_deg, lon_deg) of the point beneath an inertial position."""
        return cartesian_to_latlon_deg(rot3(-self.rotation_angle_rad(t_s), r))

    def orbit_state_at(self, t_s: float, parent: "CelestialBody") -> OrbitState:
        """This body's orbit about its parent at time t_s."""
        if self.elements is None:
            raise ValueError(f"Body {self.name} has no orbit.")
        return orbit_state_at(self.elements, t_s, parent.mu, parent.radius, parent.name)
