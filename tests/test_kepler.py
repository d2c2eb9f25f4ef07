import math
import pytest

from rendezvous_sim.physics.kepler import (
    clamp_360,
    eccentric_from_true,
    mean_from_true,
    solve_keplers_equation,
    true_from_eccentric,
    wrap_to_2pi,
)


def test_kepler_zero_eccentricity():
    # If e=0, E=M exactly
    for M in [0.0, 0.5, 1.0, 2.0, 5.0]:
        E = solve_keplers_equation(M, 0.0)
        assert math.isclose((E - (M % (2*math.pi))) % (2*math.pi), 0.0, abs_tol=1e-12)


def test_kepler_converges_typical():
    E = solve_keplers_equation(M_rad=1.0, e=0.4)
    res = E - 0.4 * math.sin(E) - (1.0 % (2*math.pi))
    assert abs(res) < 1e-10


def test_kepler_rejects_hyperbolic():
    with pytest.raises(ValueError, match="0 <= e < 1"):
        solve_keplers_equation(1.0, 1.2)


def test_wrap_to_2pi():
    assert math.isclose(wrap_to_2pi(-math.pi / 2), 3 * math.pi / 2)
    assert wrap_to_2pi(2 * math.pi) == 0.0


def test_clamp_360():
    assert clamp_360(-90.0) == 270.0
    assert clamp_360(450.0) == 90.0
    assert clamp_360(360.0) == 0.0
    assert 0.0 <= clamp_360(-1e-17) < 360.0


def test_mean_from_true_circular_is_identity():
    assert math.isclose(mean_from_true(1.3, 0.0), 1.3, abs_tol=1e-12)


def test_true_and_eccentric_anomaly_agree():
    e = 0.3
    nu = 2.4
    E = eccentric_from_true(nu, e)
    assert math.isclose(true_from_eccentric(E, e), nu, abs_tol=1e-12)


def test_apsides_are_fixed_points():
    e = 0.6
    assert math.isclose(mean_from_true(0.0, e), 0.0, abs_tol=1e-12)
    assert math.isclose(mean_from_true(math.pi, e), math.pi, abs_tol=1e-12)
