import logging
import math

from rendezvous_sim.core.constants import KERBIN_ROTATION_PERIOD_S, MU_KERBIN_M3_S2, R_KERBIN_M
from rendezvous_sim.objects.celestial_body import CelestialBody
from rendezvous_sim.objects.vessel import Vessel
from rendezvous_sim.physics.orbit import OrbitalElements
from rendezvous_sim.simulation.engine import Engine
from rendezvous_sim.simulation.scenario import Scenario
from rendezvous_sim.simulation.systems.rendezvous_system import RendezvousSystem

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(levelname)-7s  %(message)s",
    datefmt="%H:%M:%S"
)


def deg(x): return x * math.pi / 180.0


scenario = Scenario(name="Launch to station")
scenario.add_body(CelestialBody("Kerbin", R_KERBIN_M, MU_KERBIN_M3_S2, KERBIN_ROTATION_PERIOD_S))
scenario.add_vessel(Vessel("STATION", "Station", "Kerbin",
                           elements=OrbitalElements(a=700000.0, e=0.001, inc_rad=deg(6.0), raan_rad=deg(80.0))))
scenario.add_vessel(Vessel("SHIP", "Ship", "Kerbin", site_lat_deg=-0.0972, site_lon_deg=-74.5577,
                           target_id="STATION"))
scenario.active_vessel_id = "SHIP"

system = RendezvousSystem(recompute_every_tick=True)
log = Engine(dt_s=600.0, systems=[system]).run(scenario, 0.0, 3600.0)

for t, snap in log.rendezvous:
    print(f"t={t:7.0f}s  phase={snap.phase_angle:6.1f}°  rel.inc={snap.relative_inclination:5.2f}°  "
          f"time to plane={snap.time_to_plane:8.1f}s  distance={snap.distance / 1000.0:8.1f} km")
