"""
Keplerian orbits: classical elements, element-to-state evaluation and the
OrbitState snapshot the rendezvous geometry reads.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

from rendezvous_sim.core.constants import CIRCULAR_ECCENTRICITY, MU_EARTH_KM3_S2, ZERO_TOLERANCE
from rendezvous_sim.core.frames import (
    ZERO_VECTOR,
    Vector3,
    cross,
    dot,
    exclude,
    norm,
    normalize,
    perifocal_to_inertial,
    scale,
    signed_angle_rad,
    sub,
)
from rendezvous_sim.physics.kepler import (
    clamp_360,
    mean_from_true,
    solve_keplers_equation,
    true_from_eccentric,
    wrap_to_2pi,
)


@dataclass(frozen=True)
class OrbitalElements:
    """
    Classical Orbital Elements (COEs) for an elliptic orbit.

    Lengths are in whatever unit the parent body's gravitational parameter
    uses (km for the Earth constants, m for Kerbin).

    Units:
        a: semi-major axis
        e: eccentricity (0<=e<1)
        inc_rad: inclination in radians
        raan_rad: longitude of ascending node in radians
        argp_rad: argument of periapsis in radians
        M0_rad: mean anomaly at epoch (t=0) in radians
    """
    a: float
    e: float
    inc_rad: float
    raan_rad: float = 0.0
    argp_rad: float = 0.0
    M0_rad: float = 0.0

    def __post_init__(self):
        if self.a <= 0:
            raise ValueError("Semi-major axis must be positive.")
        if not (0.0 <= self.e < 1.0):
            raise ValueError("Only elliptic orbits are supported (0 <= e < 1).")
        if not (0.0 <= self.inc_rad <= math.pi):
            raise ValueError(f"Inclination must be in range [0, π] radians. Got: {self.inc_rad}")
        if not math.isfinite(self.raan_rad):
            raise ValueError(f"RAAN must be finite. Got: {self.raan_rad}")
        if not math.isfinite(self.argp_rad):
            raise ValueError(f"Argument of periapsis must be finite. Got: {self.argp_rad}")
        if not math.isfinite(self.M0_rad):
            raise ValueError(f"Mean anomaly must be finite. Got: {self.M0_rad}")


def mean_motion_rad_s(a: float, mu: float = MU_EARTH_KM3_S2) -> float:
    """n = sqrt(mu / a^3)."""
    return math.sqrt(mu / (a ** 3))


def coe_to_rv(elements: OrbitalElements, t_s: float, mu: float = MU_EARTH_KM3_S2) -> Tuple[Vector3, Vector3]:
    """
    Convert orbital elements at epoch + t to inertial position and velocity.
    Two-body Keplerian evaluation using mean anomaly.
    """
    a = elements.a
    e = elements.e

    n = mean_motion_rad_s(a, mu)
    M = wrap_to_2pi(elements.M0_rad + n * t_s)

    E = solve_keplers_equation(M, e)
    nu = true_from_eccentric(E, e)

    r_mag = a * (1.0 - e * math.cos(E))
    r_pqw: Vector3 = (r_mag * math.cos(nu), r_mag * math.sin(nu), 0.0)

    # p = a(1-e^2), h = sqrt(mu p)
    p = a * (1.0 - e * e)
    h = math.sqrt(mu * p)
    v_pqw: Vector3 = (
        -mu / h * math.sin(nu),
        mu / h * (e + math.cos(nu)),
        0.0,
    )

    return perifocal_to_inertial(r_pqw, v_pqw, elements.raan_rad, elements.inc_rad, elements.argp_rad)


def eccentricity_vector_of(r: Vector3, v: Vector3, mu: float) -> Vector3:
    """e = ((v^2 - mu/r) r - (r.v) v) / mu, pointing at periapsis."""
    r_mag = norm(r)
    return scale(1.0 / mu, sub(scale(dot(v, v) - mu / r_mag, r), scale(dot(r, v), v)))


@dataclass(frozen=True)
class OrbitState:
    """
    Instantaneous snapshot of one orbit, as handed over by the host.

    Position and velocity are relative to the parent body in its inertial
    orbit frame (+z along the parent's spin axis). The scalar fields are
    derived upstream and only passed through.
    """
    position: Vector3
    velocity: Vector3
    normal: Vector3
    semi_major_axis: float
    semi_minor_axis: float
    apoapsis_height: float
    periapsis_height: float
    period: float
    time_to_apoapsis: float
    time_to_periapsis: float
    altitude: float
    reference_body: str = ""

    @property
    def orbital_speed(self) -> float:
        return norm(self.velocity)

    @property
    def gravitational_parameter(self) -> float:
        # Kepler's third law: mu = 4 pi^2 a^3 / T^2
        return 4.0 * math.pi ** 2 * self.semi_major_axis ** 3 / self.period ** 2

    @property
    def eccentricity_vector(self) -> Vector3:
        return eccentricity_vector_of(self.position, self.velocity, self.gravitational_parameter)

    @property
    def eccentricity(self) -> float:
        return norm(self.eccentricity_vector)

    def _periapsis_direction(self) -> Vector3:
        # Circular orbits have no periapsis; anomalies are measured from "now"
        e_vec = self.eccentricity_vector
        if norm(e_vec) <= CIRCULAR_ECCENTRICITY:
            return normalize(self.position)
        return normalize(e_vec)

    def true_anomaly_of(self, vector: Vector3) -> float:
        """True anomaly (rad, [0, 2π)) of a direction projected into the orbital plane."""
        in_plane = exclude(self.normal, vector)
        return signed_angle_rad(self._periapsis_direction(), in_plane, self.normal)

    @property
    def true_anomaly(self) -> float:
        return self.true_anomaly_of(self.position)

    def time_to_true_anomaly(self, nu_rad: float) -> float:
        """Time until the orbit next reaches nu_rad, in [0, period)."""
        e = min(self.eccentricity, 1.0 - 1e-12)
        if e <= CIRCULAR_ECCENTRICITY:
            e = 0.0
        dM = wrap_to_2pi(mean_from_true(nu_rad, e) - mean_from_true(self.true_anomaly, e))
        return dM / (2.0 * math.pi) * self.period

    def time_to_vector(self, vector: Vector3) -> float:
        """Forward time until the orbiting body sweeps through the given direction."""
        return self.time_to_true_anomaly(self.true_anomaly_of(vector))

    def angle_to_vector(self, vector: Vector3) -> float:
        """Angle in degrees, [0, 360), from the current position forward to the direction."""
        delta = wrap_to_2pi(self.true_anomaly_of(vector) - self.true_anomaly)
        return clamp_360(math.degrees(delta))


def orbit_state_from_rv(r: Vector3, v: Vector3, mu: float, body_radius: float = 0.0,
                        reference_body: str = "") -> OrbitState:
    """
    Reduce an inertial state vector to an OrbitState.

    Args:
        r: Position relative to the parent body
        v: Velocity relative to the parent body
        mu: Parent gravitational parameter
        body_radius: Parent radius; heights and altitude are measured from it
        reference_body: Parent body name

    Raises:
        ValueError: if the state is not on a bound elliptic orbit
    """
    r_mag = norm(r)
    if r_mag <= ZERO_TOLERANCE:
        raise ValueError("Position vector must be non-zero.")

    h = cross(r, v)
    # Purely radial motion has no orbital plane; fall back to the spin axis
    normal = normalize(h) if norm(h) > ZERO_TOLERANCE else (0.0, 0.0, 1.0)

    energy = dot(v, v) / 2.0 - mu / r_mag
    if energy >= 0.0:
        raise ValueError("Only elliptic orbits are supported (specific energy must be negative).")
    a = -mu / (2.0 * energy)

    e_vec = eccentricity_vector_of(r, v, mu)
    e = norm(e_vec)
    if e >= 1.0:
        raise ValueError(f"Only elliptic orbits are supported (0 <= e < 1). Got: {e}")

    period = 2.0 * math.pi * math.sqrt(a ** 3 / mu)

    if e <= CIRCULAR_ECCENTRICITY:
        M = 0.0
    else:
        nu = signed_angle_rad(e_vec, r, normal)
        M = mean_from_true(nu, e)

    n = 2.0 * math.pi / period

    return OrbitState(
        position=r,
        velocity=v,
        normal=normal,
        semi_major_axis=a,
        semi_minor_axis=a * math.sqrt(1.0 - e * e),
        apoapsis_height=a * (1.0 + e) - body_radius,
        periapsis_height=a * (1.0 - e) - body_radius,
        period=period,
        time_to_apoapsis=wrap_to_2pi(math.pi - M) / n,
        time_to_periapsis=wrap_to_2pi(-M) / n,
        altitude=r_mag - body_radius,
        reference_body=reference_body,
    )


def rest_state(r: Vector3, mu: float, body_radius: float = 0.0, reference_body: str = "",
               normal: Vector3 = (0.0, 0.0, 1.0)) -> OrbitState:
    """
    Snapshot of a point momentarily at rest relative to its parent.

    Its orbit is the degenerate radial ellipse (e = 1) that falls straight
    down: r is the apoapsis, the periapsis is the body centre and
    a = |r| / 2. With no angular momentum there is no orbital plane, so the
    caller supplies the normal (the parent's spin axis for a polar site).
    """
    r_mag = norm(r)
    if r_mag <= ZERO_TOLERANCE:
        raise ValueError("Position vector must be non-zero.")

    a = r_mag / 2.0
    period = 2.0 * math.pi * math.sqrt(a ** 3 / mu)

    return OrbitState(
        position=r,
        velocity=ZERO_VECTOR,
        normal=normalize(normal),
        semi_major_axis=a,
        semi_minor_axis=0.0,
        apoapsis_height=r_mag - body_radius,
        periapsis_height=-body_radius,
        period=period,
        time_to_apoapsis=0.0,
        time_to_periapsis=period / 2.0,
        altitude=r_mag - body_radius,
        reference_body=reference_body,
    )


def orbit_state_at(elements: OrbitalElements, t_s: float, mu: float = MU_EARTH_KM3_S2,
                   body_radius: float = 0.0, reference_body: str = "") -> OrbitState:
    """Evaluate elements at epoch + t_s and return the snapshot."""
    r, v = coe_to_rv(elements, t_s, mu)
    return orbit_state_from_rv(r, v, mu, body_radius, reference_body)

