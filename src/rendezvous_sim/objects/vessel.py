from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from rendezvous_sim.core.constants import RADIAL_ECCENTRICITY_MARGIN
from rendezvous_sim.core.frames import norm
from rendezvous_sim.objects.celestial_body import CelestialBody
from rendezvous_sim.physics.orbit import (
    OrbitalElements,
    OrbitState,
    eccentricity_vector_of,
    orbit_state_at,
    orbit_state_from_rv,
    rest_state,
)


@dataclass
class Vessel:
    """
    A craft either orbiting `body` on fixed elements or sitting on its surface
    at (site_lat_deg, site_lon_deg). target_id names another vessel or a body.
    """
    vessel_id: str
    name: str
    body: str
    elements: Optional[OrbitalElements] = None
    site_lat_deg: Optional[float] = None
    site_lon_deg: Optional[float] = None
    target_id: Optional[str] = None

    # Cached state (handy for debugging a tick)
    last_t_s: Optional[float] = None
    last_state: Optional[OrbitState] = None

    def __post_init__(self):
        if not self.vessel_id.strip():
            raise ValueError("Vessel ID cannot be empty or whitespace.")
        has_site = self.site_lat_deg is not None and self.site_lon_deg is not None
        if self.elements is None and not has_site:
            raise ValueError("A vessel needs orbital elements or a landing site.")
        if self.elements is not None and has_site:
            raise ValueError("A vessel cannot both orbit and be landed.")
        if has_site and not (-90.0 <= self.site_lat_deg <= 90.0):
            raise ValueError(f"Latitude must be in range [-90, 90] degrees. Got: {self.site_lat_deg}")

    @property
    def landed(self) -> bool:
        return self.elements is None

    def state_at(self, t_s: float, body: CelestialBody) -> OrbitState:
        """
        Orbit about `body` at time t_s. A landed vessel rides the surface, so
        its orbit is the (suborbital) one of a co-rotating point; at a pole it is
        the radial drop of a point at rest.
        """
        if self.elements is not None:
            state = orbit_state_at(self.elements, t_s, body.mu, body.radius, body.name)
        else:
            r = body.surface_position(self.site_lat_deg, self.site_lon_deg, t_s)
            v = body.surface_velocity(r)
            if norm(eccentricity_vector_of(r, v, body.mu)) < 1.0 - RADIAL_ECCENTRICITY_MARGIN:
                state = orbit_state_from_rv(r, v, body.mu, body.radius, body.name)
            else:
                # On (or next to) the spin axis the site barely moves: a straight drop
                state = rest_state(r, body.mu, body.radius, body.name)

        self.last_t_s = t_s
        self.last_state = state
        return state

    def surface_coordinates_at(self, t_s: float, body: CelestialBody) -> Tuple[float, float]:
        """(lat_deg, lon_deg) of the vessel, or of the point beneath it."""
        if self.landed:
            return self.site_lat_deg, self.site_lon_deg
        return body.surface_coordinates(self.state_at(t_s, body).position, t_s)
