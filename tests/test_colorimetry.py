from __future__ import annotations

import numpy as np
import pytest

from spectrolocus.chromaticity import xyz_to_xy
from spectrolocus.color_system import xyz_to_rgb
from spectrolocus.colorimetry import interpolate_observer, monochromatic_to_xyz, spectrum_to_xyz
from spectrolocus.presets import generate_gaussian_spectrum


def test_interpolate_observer_at_table_and_between() -> None:
    assert interpolate_observer(555.0) == pytest.approx((0.512050, 1.0, 0.005750))

    xbar, ybar, zbar = interpolate_observer(552.5)
    assert xbar == pytest.approx((0.433450 + 0.512050) / 2)
    assert ybar == pytest.approx((0.994950 + 1.0) / 2)
    assert zbar == pytest.approx((0.008750 + 0.005750) / 2)


def test_interpolate_observer_outside_range_is_zero() -> None:
    assert interpolate_observer(379.0) == (0.0, 0.0, 0.0)
    assert interpolate_observer(781.0) == (0.0, 0.0, 0.0)

    xbar, ybar, zbar = interpolate_observer(np.array([300.0, 555.0, 900.0]))
    np.testing.assert_allclose(ybar, [0.0, 1.0, 0.0])
    assert xbar.shape == (3,)


def test_spectrum_to_xyz_needs_two_points() -> None:
    assert spectrum_to_xyz([]) == (0.0, 0.0, 0.0)
    assert spectrum_to_xyz([(550.0, 1.0)]) == (0.0, 0.0, 0.0)


def test_spectrum_to_xyz_raw_trapezoid() -> None:
    xyz = spectrum_to_xyz([(555.0, 2.0), (550.0, 2.0)], normalize=False)

    # 0.5*(2*f(550) + 2*f(555))*5
    assert xyz.X == pytest.approx(5 * (0.433450 + 0.512050))
    assert xyz.Y == pytest.approx(5 * (0.994950 + 1.0))
    assert xyz.Z == pytest.approx(5 * (0.008750 + 0.005750))


def test_spectrum_to_xyz_normalizes_y() -> None:
    spectrum = generate_gaussian_spectrum(470, 40)

    xyz = spectrum_to_xyz(spectrum)
    assert xyz.Y == pytest.approx(100.0)

    scaled = [(w, 7.5 * i) for w, i in spectrum]
    np.testing.assert_allclose(spectrum_to_xyz(scaled), xyz)


def test_spectrum_order_does_not_matter() -> None:
    spectrum = generate_gaussian_spectrum(620, 50)
    np.testing.assert_allclose(spectrum_to_xyz(spectrum[::-1]), spectrum_to_xyz(spectrum))


def test_zero_spectrum_stays_zero() -> None:
    xyz = spectrum_to_xyz([(400.0, 0.0), (500.0, 0.0), (600.0, 0.0)])
    assert xyz == (0.0, 0.0, 0.0)


def test_green_gaussian_scenario() -> None:
    xyz = spectrum_to_xyz(generate_gaussian_spectrum(530, 50))
    x, y = xyz_to_xy(xyz)
    r, g, b = xyz_to_rgb(xyz)

    assert xyz.Y == pytest.approx(100.0)
    assert 0.2 <= x <= 0.3
    # a 50 nm band at 530 nm sits just above y = 0.7
    assert 0.6 <= y <= 0.72
    assert g > r >= b


def test_equal_energy_is_near_white() -> None:
    flat = [(float(w), 1.0) for w in range(380, 781, 5)]
    x, y = xyz_to_xy(spectrum_to_xyz(flat))

    assert x == pytest.approx(1 / 3, abs=2e-3)
    assert y == pytest.approx(1 / 3, abs=2e-3)


def test_monochromatic_to_xyz() -> None:
    xyz = monochromatic_to_xyz(555)
    assert xyz == pytest.approx((51.205, 100.0, 0.575))

    assert monochromatic_to_xyz(300) == (0.0, 0.0, 0.0)


def test_narrow_line_matches_monochromatic() -> None:
    spike = [(549.0, 0.0), (550.0, 1.0), (551.0, 0.0)]
    np.testing.assert_allclose(spectrum_to_xyz(spike), monochromatic_to_xyz(550), rtol=1e-9)
