"""
Tests for the rendezvous snapshot: gating, origin selection and the full pass.
"""
import math
from dataclasses import replace

import pytest

from rendezvous_sim.core.constants import KERBIN_ROTATION_PERIOD_S, MU_KERBIN_M3_S2, R_KERBIN_M
from rendezvous_sim.objects.celestial_body import RotatingBodyState
from rendezvous_sim.physics.kepler import clamp_360
from rendezvous_sim.physics.orbit import OrbitalElements, orbit_state_at
from rendezvous_sim.simulation.snapshot import (
    RendezvousContext,
    RendezvousSnapshot,
    compute_rendezvous,
    missing_input,
    preconditions_met,
    resolve_origin_orbit,
    update_rendezvous,
)


def deg(x):
    return x * math.pi / 180.0


def circular(radius, anomaly_deg=0.0, inc_deg=0.0, raan_deg=0.0, parent="Kerbin"):
    elements = OrbitalElements(a=radius, e=0.0, inc_rad=deg(inc_deg), raan_rad=deg(raan_deg), M0_rad=deg(anomaly_deg))
    return orbit_state_at(elements, 0.0, MU_KERBIN_M3_S2, R_KERBIN_M, parent)


@pytest.fixture
def kerbin():
    return RotatingBodyState.from_rotation(R_KERBIN_M, KERBIN_ROTATION_PERIOD_S)


@pytest.fixture
def context(kerbin):
    return RendezvousContext(
        vessel_orbit=circular(700000.0),
        target_orbit=circular(800000.0, anomaly_deg=45.0, inc_deg=5.0),
        reference_body="Kerbin",
        is_root_body=True,
        body=kerbin,
    )


class TestDefaultSnapshot:
    def test_everything_zeroed(self):
        snap = RendezvousSnapshot()
        assert snap.details_available is False
        assert snap.same_reference_frame is False
        assert snap.landed is False
        assert snap.distance == 0.0
        assert snap.phase_angle == 0.0
        assert snap.time_to_rendezvous == 0.0
        assert snap.time_to_plane_ascending is None

    def test_snapshot_is_immutable(self):
        snap = RendezvousSnapshot()
        with pytest.raises(AttributeError):
            snap.distance = 5.0


class TestPreconditions:
    def test_complete_context_passes(self, context):
        assert missing_input(context) is None
        assert preconditions_met(context)

    def test_no_vessel(self, context):
        assert missing_input(replace(context, vessel_orbit=None)) == "no active vessel orbit"

    def test_no_target(self, context):
        assert missing_input(replace(context, target_orbit=None)) == "no target orbit"

    def test_no_reference_body(self, context):
        assert missing_input(replace(context, reference_body=None)) == "no reference body"

    def test_moon_without_orbit_is_rejected(self, context):
        ctx = replace(context, reference_body="Mun", is_root_body=False, reference_body_orbit=None)
        assert missing_input(ctx) == "reference body has no orbit"
        assert not preconditions_met(ctx)

    def test_shared_parent_needs_no_body_orbit(self, context):
        ctx = replace(context, is_root_body=False, reference_body_orbit=None)
        assert ctx.same_reference_frame
        assert preconditions_met(ctx)


class TestResolveOriginOrbit:
    def test_root_body_uses_vessel_orbit(self, context):
        origin, same_frame = resolve_origin_orbit(context)
        assert origin is context.vessel_orbit
        assert same_frame

    def test_shared_parent_uses_vessel_orbit(self, context):
        mun_orbit = circular(12000000.0)
        ctx = replace(context, is_root_body=False, reference_body_orbit=mun_orbit)
        origin, same_frame = resolve_origin_orbit(ctx)
        assert origin is ctx.vessel_orbit
        assert same_frame

    def test_moon_uses_its_orbit(self, context):
        mun_orbit = circular(12000000.0)
        ctx = replace(
            context,
            vessel_orbit=circular(300000.0, parent="Mun"),
            reference_body="Mun",
            reference_body_orbit=mun_orbit,
            is_root_body=False,
        )
        origin, same_frame = resolve_origin_orbit(ctx)
        assert origin is mun_orbit
        assert not same_frame

    def test_root_body_with_foreign_target(self, context):
        ctx = replace(context, target_orbit=circular(300000.0, parent="Mun"))
        origin, same_frame = resolve_origin_orbit(ctx)
        assert origin is ctx.vessel_orbit
        assert not same_frame


class TestComputeRendezvous:
    def test_target_values_pass_through(self, kerbin):
        target = orbit_state_at(OrbitalElements(a=800000.0, e=0.05, inc_rad=deg(10.0), M0_rad=1.0),
                                0.0, MU_KERBIN_M3_S2, R_KERBIN_M, "Kerbin")
        snap = compute_rendezvous(circular(700000.0), target, kerbin)

        assert snap.details_available
        assert snap.altitude == target.altitude
        assert snap.apoapsis_height == target.apoapsis_height
        assert snap.periapsis_height == target.periapsis_height
        assert snap.orbital_period == target.period
        assert snap.time_to_apoapsis == target.time_to_apoapsis
        assert snap.time_to_periapsis == target.time_to_periapsis
        assert snap.semi_major_axis == target.semi_major_axis
        assert snap.semi_minor_axis == target.semi_minor_axis
        assert snap.body_rotation_period == KERBIN_ROTATION_PERIOD_S

    def test_co_orbital_quarter_turn_ahead(self, kerbin):
        r = 700000.0
        snap = compute_rendezvous(circular(r), circular(r, anomaly_deg=90.0), kerbin)

        assert math.isclose(snap.phase_angle, 90.0, abs_tol=1e-9)
        assert math.isclose(snap.relative_inclination, 0.0, abs_tol=1e-9)
        # Equal radii: the transfer lead is zero, so the intercept angle is the phase angle
        assert math.isclose(snap.intercept_angle, 90.0, abs_tol=1e-9)
        assert math.isclose(snap.distance, r * math.sqrt(2.0), rel_tol=1e-12)
        assert math.isclose(snap.time_to_rendezvous, 0.0, abs_tol=1e-6)
        assert math.isclose(snap.relative_radial_velocity, 0.0, abs_tol=1e-6)
        assert math.isclose(snap.relative_speed, 0.0, abs_tol=1e-9)
        # Coplanar equatorial target
        assert snap.time_to_plane == 0.0

    def test_retrograde_target_flips_intercept(self, kerbin):
        r = 700000.0
        snap = compute_rendezvous(circular(r), circular(r, anomaly_deg=90.0, inc_deg=180.0), kerbin)

        assert math.isclose(snap.relative_inclination, 180.0, abs_tol=1e-9)
        assert math.isclose(snap.intercept_angle, clamp_360(snap.phase_angle + 180.0), abs_tol=1e-9)

    def test_relative_speed_uses_vessel_orbit(self, kerbin):
        origin = circular(12000000.0)
        vessel = circular(300000.0, parent="Mun")
        target = circular(800000.0)
        snap = compute_rendezvous(origin, target, kerbin, vessel=vessel, same_reference_frame=False)

        assert math.isclose(snap.relative_speed, vessel.orbital_speed - target.orbital_speed, rel_tol=1e-12)
        assert snap.same_reference_frame is False

    def test_without_body_timing_is_zero(self):
        snap = compute_rendezvous(circular(700000.0), circular(800000.0, inc_deg=30.0, raan_deg=20.0))
        assert snap.time_to_plane == 0.0
        assert snap.body_rotation_period == 0.0
        assert snap.details_available

    def test_angles_and_times_in_range(self, kerbin):
        origin = circular(700000.0, anomaly_deg=10.0, inc_deg=3.0)
        target = circular(900000.0, anomaly_deg=200.0, inc_deg=40.0, raan_deg=70.0)
        snap = compute_rendezvous(origin, target, kerbin, latitude_deg=12.0, longitude_deg=-30.0)

        for angle in (snap.phase_angle, snap.intercept_angle,
                      snap.angle_to_ascending_node, snap.angle_to_descending_node):
            assert 0.0 <= angle < 360.0
        assert 0.0 <= snap.relative_inclination <= 180.0
        assert 0.0 <= snap.time_to_ascending_node < origin.period
        assert 0.0 <= snap.time_to_descending_node < origin.period
        assert 0.0 <= snap.time_to_plane < KERBIN_ROTATION_PERIOD_S
        # Nodes are opposite each other
        gap = clamp_360(snap.angle_to_descending_node - snap.angle_to_ascending_node)
        assert math.isclose(gap, 180.0, abs_tol=1e-6)
        assert snap.time_to_plane_ascending is None


class TestUpdateRendezvous:
    def test_fresh_pass(self, context):
        snap = update_rendezvous(context)
        assert snap.details_available
        assert snap.same_reference_frame
        assert snap.distance > 0.0

    def test_missing_target_keeps_previous_values(self, context):
        previous = update_rendezvous(context)
        stale = update_rendezvous(replace(context, target_orbit=None), previous)

        assert stale.details_available is False
        assert stale == replace(previous, details_available=False)

    def test_missing_input_without_previous_gives_default(self):
        assert update_rendezvous(RendezvousContext()) == RendezvousSnapshot()

    def test_landed_flag_carried(self, context):
        snap = update_rendezvous(replace(context, landed=True))
        assert snap.landed

    def test_moon_distance_measured_from_moon_orbit(self, context):
        mun_orbit = circular(12000000.0)
        ctx = replace(
            context,
            vessel_orbit=circular(300000.0, parent="Mun"),
            reference_body="Mun",
            reference_body_orbit=mun_orbit,
            is_root_body=False,
        )
        snap = update_rendezvous(ctx)
        target = ctx.target_orbit

        dx = [t - o for t, o in zip(target.position, mun_orbit.position)]
        assert math.isclose(snap.distance, math.sqrt(sum(c * c for c in dx)), rel_tol=1e-12)
        assert snap.same_reference_frame is False
