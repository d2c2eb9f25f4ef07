# Two-body anomaly relations

from __future__ import annotations

import math


def wrap_to_2pi(angle_rad: float) -> float:
    """Wrap angle to [0, 2π)."""
    two_pi = 2.0 * math.pi
    return angle_rad % two_pi


def clamp_360(angle_deg: float) -> float:
    """Wrap angle to [0, 360) degrees."""
    angle = angle_deg % 360.0
    # -1e-17 % 360.0 rounds to 360.0
    if angle >= 360.0:
        angle -= 360.0
    return angle


def solve_keplers_equation(M_rad: float, e: float, tol: float = 1e-12, max_iter: int = 50) -> float:
    """
    Solve Kepler's equation for elliptic orbits:
        M = E - e sin(E)
    using Newton-Raphson.

    Args:
        M_rad: Mean anomaly (rad)
        e: eccentricity (0 <= e < 1)
        tol: convergence tolerance
        max_iter: iteration cap

    Returns:
        E_rad: Eccentric anomaly (rad)
    """
    if not (0.0 <= e < 1.0):
        raise ValueError("Elliptic Kepler solver requires 0 <= e < 1.")

    M = wrap_to_2pi(M_rad)

    # For higher e, start closer to pi to avoid slow convergence near M~0
    E = M if e < 0.8 else math.pi

    for _ in range(max_iter):
        f = E - e * math.sin(E) - M
        fp = 1.0 - e * math.cos(E)
        if abs(fp) < 1e-15:
            break
        dE = -f / fp
        E += dE
        if abs(dE) < tol:
            return wrap_to_2pi(E)

    raise RuntimeError("Kepler solver did not converge within max_iter.")


def eccentric_from_true(nu_rad: float, e: float) -> float:
    """Eccentric anomaly for a true anomaly, same half-plane, in [0, 2π)."""
    E = math.atan2(math.sqrt(1.0 - e * e) * math.sin(nu_rad), e + math.cos(nu_rad))
    return wrap_to_2pi(E)


def true_from_eccentric(E_rad: float, e: float) -> float:
    sin_v = (math.sqrt(1.0 - e * e) * math.sin(E_rad)) / (1.0 - e * math.cos(E_rad))
    cos_v = (math.cos(E_rad) - e) / (1.0 - e * math.cos(E_rad))
    return wrap_to_2pi(math.atan2(sin_v, cos_v))


def mean_from_true(nu_rad: float, e: float) -> float:
    """M = E - e sin(E), wrapped to [0, 2π)."""
    E = eccentric_from_true(nu_rad, e)
    return wrap_to_2pi(E - e * math.sin(E))
