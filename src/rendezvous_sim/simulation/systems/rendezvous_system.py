from __future__ import annotations

import logging
from dataclasses import dataclass, field

from rendezvous_sim.simulation.engine import SimulationLog
from rendezvous_sim.simulation.scenario import Scenario
from rendezvous_sim.simulation.snapshot import RendezvousContext, RendezvousSnapshot, update_rendezvous

logger = logging.getLogger(__name__)


def gather_context(scenario: Scenario, t_s: float) -> RendezvousContext:
    """Collect the active vessel's and its target's state at t_s."""
    vessel = scenario.active_vessel
    if vessel is None:
        return RendezvousContext()

    body = scenario.bodies[vessel.body]
    lat, lon = vessel.surface_coordinates_at(t_s, body)

    return RendezvousContext(
        vessel_orbit=vessel.state_at(t_s, body),
        target_orbit=scenario.target_orbit_at(vessel.target_id, t_s),
        reference_body=body.name,
        reference_body_orbit=scenario.body_orbit_at(body, t_s),
        is_root_body=body.is_root,
        body=body.rotating_state_at(t_s),
        latitude_deg=lat,
        longitude_deg=lon,
        landed=vessel.landed,
    )


@dataclass
class RendezvousSystem:
    """
    Recomputes the rendezvous snapshot on ticks where an update was requested.

    The result is built off to the side and published by a single assignment
    to `snapshot`, so a reader never sees a half-written pass.
    """
    name: str = "rendezvous"
    recompute_every_tick: bool = False
    update_requested: bool = False
    snapshot: RendezvousSnapshot = field(default_factory=RendezvousSnapshot)

    def request_update(self) -> None:
        self.update_requested = True

    def on_step(self, t_s: float, scenario: Scenario, log: SimulationLog) -> None:
        if self.recompute_every_tick:
            self.update_requested = True
        if not self.update_requested:
            return
        self.update_requested = False
        logger.debug("Recomputing rendezvous at t=%.1fs", t_s)

        snapshot = update_rendezvous(gather_context(scenario, t_s), self.snapshot)

        if snapshot.details_available != self.snapshot.details_available:
            logger.info("Rendezvous details %s at t=%.1fs",
                        "available" if snapshot.details_available else "unavailable", t_s)
            log.record_event(t_s, "rendezvous_details", available=snapshot.details_available)

        self.snapshot = snapshot
        log.record_rendezvous(t_s, snapshot)
