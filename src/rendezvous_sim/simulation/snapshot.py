"""
Rendezvous snapshot: one pass of the orbit geometry over the current tick.

The caller owns the snapshot. A successful pass returns a brand new value;
a pass whose inputs are missing returns the previous value with
details_available cleared, so consumers can keep showing last-known-good
numbers while a target is briefly lost. Check details_available first.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Optional, Tuple

from rendezvous_sim.objects.celestial_body import RotatingBodyState
from rendezvous_sim.physics.geometry import (
    ascending_node,
    closing_kinematics,
    descending_node,
    intercept_angle,
    phase_angle,
    relative_inclination,
    time_to_plane,
)
from rendezvous_sim.physics.orbit import OrbitState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RendezvousSnapshot:
    """Metrics relating the origin orbit to the target orbit."""
    # Target orbit, passed through
    altitude: float = 0.0
    apoapsis_height: float = 0.0
    periapsis_height: float = 0.0
    orbital_period: float = 0.0
    time_to_apoapsis: float = 0.0
    time_to_periapsis: float = 0.0
    semi_major_axis: float = 0.0
    semi_minor_axis: float = 0.0

    # Relative motion
    distance: float = 0.0
    relative_speed: float = 0.0
    relative_velocity: float = 0.0
    relative_radial_velocity: Optional[float] = 0.0
    time_to_rendezvous: Optional[float] = 0.0

    # Angular geometry (degrees)
    phase_angle: float = 0.0
    intercept_angle: float = 0.0
    relative_inclination: float = 0.0
    angle_to_ascending_node: float = 0.0
    angle_to_descending_node: float = 0.0

    # Timing (seconds)
    time_to_ascending_node: float = 0.0
    time_to_descending_node: float = 0.0
    time_to_plane: float = 0.0
    body_rotation_period: float = 0.0

    # No derivation exists for this yet; it stays unset
    time_to_plane_ascending: Optional[bool] = None

    details_available: bool = False
    same_reference_frame: bool = False
    landed: bool = False


@dataclass(frozen=True)
class RendezvousContext:
    """
    Inputs gathered by the host for one pass.

    reference_body is the vessel's parent body; reference_body_orbit is that
    body's orbit about its own parent (None when it is the root body).
    body is the reference body's spin state, used for the time to plane.
    """
    vessel_orbit: Optional[OrbitState] = None
    target_orbit: Optional[OrbitState] = None
    reference_body: Optional[str] = None
    reference_body_orbit: Optional[OrbitState] = None
    is_root_body: bool = False
    body: Optional[RotatingBodyState] = None
    latitude_deg: float = 0.0
    longitude_deg: float = 0.0
    landed: bool = False

    @property
    def same_reference_frame(self) -> bool:
        return (self.target_orbit is not None
                and self.reference_body is not None
                and self.target_orbit.reference_body == self.reference_body)


def missing_input(context: RendezvousContext) -> Optional[str]:
    """Name of the first missing input, or None when a pass can run."""
    if context.vessel_orbit is None:
        return "no active vessel orbit"
    if context.target_orbit is None:
        return "no target orbit"
    if context.reference_body is None:
        return "no reference body"
    if not (context.is_root_body or context.same_reference_frame) and context.reference_body_orbit is None:
        return "reference body has no orbit"
    return None


def preconditions_met(context: RendezvousContext) -> bool:
    return missing_input(context) is None


def resolve_origin_orbit(context: RendezvousContext) -> Tuple[OrbitState, bool]:
    """
    Orbit to compare against the target, and whether both share a parent.

    The vessel's own orbit is used around the root body or when it shares the
    target's parent; otherwise its reference body's orbit stands in for it.
    """
    same_frame = context.same_reference_frame
    if context.is_root_body or same_frame:
        return context.vessel_orbit, same_frame
    return context.reference_body_orbit, same_frame


def compute_rendezvous(origin: OrbitState, target: OrbitState,
                       body: Optional[RotatingBodyState] = None, *,
                       vessel: Optional[OrbitState] = None,
                       latitude_deg: float = 0.0,
                       longitude_deg: float = 0.0,
                       landed: bool = False,
                       same_reference_frame: bool = True) -> RendezvousSnapshot:
    """
    Evaluate every metric for origin vs target.

    Args:
        origin: Orbit compared against the target
        target: Target orbit
        body: Spin state of the vessel's parent; without it the time to
            plane and rotation period are left at zero
        vessel: The vessel's own orbit, for relative speed (defaults to origin)
        latitude_deg: Vessel latitude on body
        longitude_deg: Vessel longitude on body
        landed: Whether the vessel sits on the surface
        same_reference_frame: Whether vessel and target share a parent

    Returns:
        A fully populated snapshot with details_available set
    """
    if vessel is None:
        vessel = origin

    inclination = relative_inclination(origin, target)
    phase = phase_angle(origin, target)
    intercept = intercept_angle(origin, target, phase, inclination)

    asc = ascending_node(target, origin)
    desc = descending_node(target, origin)

    plane_time = 0.0
    rotation_period = 0.0
    if body is not None:
        plane_time = time_to_plane(body, latitude_deg, longitude_deg, target)
        rotation_period = body.rotation_period

    closing = closing_kinematics(origin, target)

    return RendezvousSnapshot(
        altitude=target.altitude,
        apoapsis_height=target.apoapsis_height,
        periapsis_height=target.periapsis_height,
        orbital_period=target.period,
        time_to_apoapsis=target.time_to_apoapsis,
        time_to_periapsis=target.time_to_periapsis,
        semi_major_axis=target.semi_major_axis,
        semi_minor_axis=target.semi_minor_axis,
        distance=closing.distance,
        relative_speed=vessel.orbital_speed - target.orbital_speed,
        relative_velocity=closing.relative_velocity,
        relative_radial_velocity=closing.relative_radial_velocity,
        time_to_rendezvous=closing.time_to_rendezvous,
        phase_angle=phase,
        intercept_angle=intercept,
        relative_inclination=inclination,
        angle_to_ascending_node=origin.angle_to_vector(asc),
        angle_to_descending_node=origin.angle_to_vector(desc),
        time_to_ascending_node=origin.time_to_vector(asc),
        time_to_descending_node=origin.time_to_vector(desc),
        time_to_plane=plane_time,
        body_rotation_period=rotation_period,
        time_to_plane_ascending=None,
        details_available=True,
        same_reference_frame=same_reference_frame,
        landed=landed,
    )


def update_rendezvous(context: RendezvousContext,
                      previous: Optional[RendezvousSnapshot] = None) -> RendezvousSnapshot:
    """
    Run one pass: gate, resolve the origin orbit, compute.

    On missing inputs returns previous (or the all-zero default) with only
    details_available cleared.
    """
    if previous is None:
        previous = RendezvousSnapshot()

    reason = missing_input(context)
    if reason is not None:
        logger.debug("Skipping rendezvous pass: %s", reason)
        return replace(previous, details_available=False)

    origin, same_frame = resolve_origin_orbit(context)
    return compute_rendezvous(
        origin,
        context.target_orbit,
        context.body,
        vessel=context.vessel_orbit,
        latitude_deg=context.latitude_deg,
        longitude_deg=context.longitude_deg,
        landed=context.landed,
        same_reference_frame=same_frame,
    )
