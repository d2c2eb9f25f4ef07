from __future__ import annotations

# Earth gravitational parameter (mu) in km^3/s^2 (WGS-84 standard value)
MU_EARTH_KM3_S2: float = 398600.4418

# Mean Earth radius in km (approx)
R_EARTH_KM: float = 6378.137

# Kerbin reference values (metres), handy for launch-site scenarios
MU_KERBIN_M3_S2: float = 3.5316e12
R_KERBIN_M: float = 600000.0
KERBIN_ROTATION_PERIOD_S: float = 21549.425

# Below this a vector length (or squared length) is treated as zero
ZERO_TOLERANCE: float = 1e-12

# sin(angle) below this means two axes are parallel
PARALLEL_TOLERANCE: float = 1e-9

# Eccentricity below this is treated as circular
CIRCULAR_ECCENTRICITY: float = 1e-9

# Eccentricity within this of 1 is treated as a straight radial drop
RADIAL_ECCENTRICITY_MARGIN: float = 1e-9
