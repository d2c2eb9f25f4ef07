from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from rendezvous_sim.objects.celestial_body import CelestialBody
from rendezvous_sim.objects.vessel import Vessel
from rendezvous_sim.physics.orbit import OrbitState


@dataclass
class Scenario:
    """
    Container for all objects in a simulation run.
    Keep this pure: just data + lookup, no stepping logic.
    Lookups of unknown ids return None rather than raising.
    """
    name: str
    bodies: Dict[str, CelestialBody] = field(default_factory=dict)
    vessels: Dict[str, Vessel] = field(default_factory=dict)
    active_vessel_id: Optional[str] = None

    def add_body(self, body: CelestialBody) -> None:
        if body.name in self.bodies:
            raise ValueError(f"Duplicate body name: {body.name}")
        if body.parent is not None and body.parent not in self.bodies:
            raise ValueError(f"Unknown parent body: {body.parent}")
        self.bodies[body.name] = body

    def add_vessel(self, vessel: Vessel) -> None:
        if vessel.vessel_id in self.vessels:
            raise ValueError(f"Duplicate vessel ID: {vessel.vessel_id}")
        if vessel.body not in self.bodies:
            raise ValueError(f"Unknown body: {vessel.body}")
        self.vessels[vessel.vessel_id] = vessel

    def body(self, name: Optional[str]) -> Optional[CelestialBody]:
        return self.bodies.get(name) if name is not None else None

    def vessel(self, vessel_id: Optional[str]) -> Optional[Vessel]:
        return self.vessels.get(vessel_id) if vessel_id is not None else None

    @property
    def active_vessel(self) -> Optional[Vessel]:
        return self.vessel(self.active_vessel_id)

    def body_orbit_at(self, body: CelestialBody, t_s: float) -> Optional[OrbitState]:
        """Orbit of a body about its parent; None for the root."""
        parent = self.body(body.parent)
        if parent is None:
            return None
        return body.orbit_state_at(t_s, parent)

    def target_orbit_at(self, target_id: Optional[str], t_s: float) -> Optional[OrbitState]:
        """Orbit of a vessel or body target; None if it is unknown or has no orbit."""
        vessel = self.vessel(target_id)
        if vessel is not None:
            return vessel.state_at(t_s, self.bodies[vessel.body])
        body = self.body(target_id)
        if body is not None:
            return self.body_orbit_at(body, t_s)
        return None

    def body_list(self) -> List[CelestialBody]:
        return list(self.bodies.values())

    def vessel_list(self) -> List[Vessel]:
        return list(self.vessels.values())
