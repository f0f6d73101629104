from __future__ import annotations

import numpy as np
import pytest
from scipy.interpolate import CubicSpline

from spectrolocus import locus
from spectrolocus.analysis import analyze_spectrum
from spectrolocus.chromaticity import xy_to_uv
from spectrolocus.presets import generate_gaussian_spectrum
from spectrolocus.reference_data import spectral_locus_xy
from spectrolocus.settings import DEFAULT_SETTINGS

INTERIOR = DEFAULT_SETTINGS.interior_reference


# ------------------------------ spline --------------------------------

def test_spline_matches_scipy_natural_spline() -> None:
    anchors = spectral_locus_xy()
    knots = anchors[:, 0]

    for col in (1, 2):
        segments = np.asarray(locus.fit_natural_cubic_spline(knots, anchors[:, col]))
        reference = CubicSpline(knots, anchors[:, col], bc_type="natural")
        np.testing.assert_allclose(segments, reference.c[::-1].T, rtol=1e-7, atol=1e-10)

        grid = np.linspace(380.0, 780.0, 1601)
        np.testing.assert_allclose(locus.evaluate_spline(knots, segments, grid), reference(grid), atol=1e-10)


def test_spline_reproduces_lines() -> None:
    knots = [0.0, 1.0, 3.0, 4.0]
    segments = locus.fit_natural_cubic_spline(knots, [1.0, 3.0, 7.0, 9.0])

    for seg in segments:
        assert seg.b == pytest.approx(2.0)
        assert seg.c == pytest.approx(0.0, abs=1e-12)
        assert seg.d == pytest.approx(0.0, abs=1e-12)
    assert locus.evaluate_spline(knots, segments, 2.5) == pytest.approx(6.0)


def test_spline_clamps_outside_knots() -> None:
    knots = [0.0, 1.0, 2.0]
    segments = locus.fit_natural_cubic_spline(knots, [0.0, 1.0, 0.0])

    assert locus.evaluate_spline(knots, segments, -5.0) == pytest.approx(0.0)
    assert locus.evaluate_spline(knots, segments, 9.0) == pytest.approx(0.0, abs=1e-12)


def test_spline_rejects_bad_knots() -> None:
    with pytest.raises(ValueError):
        locus.fit_natural_cubic_spline([0.0, 2.0, 1.0], [0.0, 1.0, 2.0])
    with pytest.raises(ValueError):
        locus.fit_natural_cubic_spline([0.0], [1.0])


# ------------------------------ locus ---------------------------------

@pytest.mark.parametrize("mode", ["CIE1931", "CIE1976"])
def test_high_resolution_locus_passes_through_anchors(mode) -> None:
    points = np.asarray(locus.high_resolution_locus(mode))
    anchors = locus.anchor_positions(mode)

    assert points.shape == (401, 3)
    np.testing.assert_allclose(points[::5], anchors, atol=1e-12)


def test_uv_anchors_are_converted() -> None:
    anchors = locus.anchor_positions("CIE1976")
    xy = spectral_locus_xy()
    np.testing.assert_allclose(anchors[40, 1:], xy_to_uv(xy[40, 1:]))


def test_locus_spline_object() -> None:
    spline = locus.LocusSpline("CIE1931")
    assert spline.wavelength_range == (380.0, 780.0)
    assert spline(550.0) == pytest.approx((0.3016, 0.6923))
    assert "CIE1931" in repr(spline)


# ------------------------------ normals -------------------------------

def test_outward_normal_flips_away_from_interior() -> None:
    n = locus.outward_normal((0.0, 0.0), (1.0, 0.0), (2.0, 0.0), interior=(1.0, 1.0))
    assert n == pytest.approx((0.0, -1.0))


def test_outward_normal_degenerate_tangent_is_radial() -> None:
    p = (0.5, 0.33)
    assert locus.outward_normal(p, p, p, interior=(0.33, 0.33)) == pytest.approx((1.0, 0.0))


@pytest.mark.parametrize("mode", ["CIE1931", "CIE1976"])
def test_locus_normals_are_unit_and_outward(mode) -> None:
    points = np.asarray(locus.high_resolution_locus(mode))
    normals = locus.locus_normals(points, INTERIOR)

    assert normals.shape == (401, 2)
    np.testing.assert_allclose(np.hypot(normals[:, 0], normals[:, 1]), 1.0)
    to_interior = np.asarray(INTERIOR) - points[:, 1:]
    assert np.all(np.sum(normals * to_interior, axis=1) <= 1e-12)


# ------------------------------- ridge --------------------------------

def test_spectrum_intensity_at() -> None:
    spectrum = [(500.0, 0.0), (510.0, 1.0)]

    assert locus.spectrum_intensity_at(spectrum, 505.0) == pytest.approx(0.5)
    assert locus.spectrum_intensity_at(spectrum, 515.0, shift_nm=10.0) == pytest.approx(0.5)
    assert locus.spectrum_intensity_at(spectrum, 520.0) == 0.0
    assert locus.spectrum_intensity_at([(500.0, 1.0)], 500.0) == 0.0


def test_ridge_band_and_zero_spectrum() -> None:
    ridge = locus.spectrum_ridge([(380.0, 0.0), (780.0, 0.0)])

    assert len(ridge) == 321
    assert ridge[0].wavelength == 380.0
    assert ridge[-1].wavelength == 700.0
    for p in ridge:
        assert p.x == p.base_x and p.y == p.base_y


def test_empty_spectrum_has_no_ridge() -> None:
    assert locus.spectrum_ridge([]) == []
    assert locus.ridge_peak([]) is None
    assert locus.ridge_outline([]).shape == (0, 2)


@pytest.mark.parametrize("mode, scale", [("CIE1931", 0.08), ("CIE1976", 0.06)])
def test_ridge_height(mode, scale) -> None:
    flat = [(380.0, 1.0), (780.0, 1.0)]

    ridge = np.asarray(locus.spectrum_ridge(flat, mode=mode))
    height = np.hypot(ridge[:, 2] - ridge[:, 0], ridge[:, 3] - ridge[:, 1])
    np.testing.assert_allclose(height, scale)

    doubled = np.asarray(locus.spectrum_ridge(flat, intensity_scale=2.0, mode=mode))
    height = np.hypot(doubled[:, 2] - doubled[:, 0], doubled[:, 3] - doubled[:, 1])
    np.testing.assert_allclose(height, 2 * scale)


def test_ridge_follows_shift() -> None:
    spectrum = generate_gaussian_spectrum(500, 20)

    assert locus.ridge_peak(locus.spectrum_ridge(spectrum)).wavelength == 500.0
    peak = locus.ridge_peak(locus.spectrum_ridge(spectrum, shift_nm=20.0))
    assert peak.wavelength == 520.0
    assert peak.intensity == pytest.approx(1.0)


def test_ridge_band_from_settings() -> None:
    settings = DEFAULT_SETTINGS.updated(ridge_max_wavelength=780.0)
    assert len(locus.spectrum_ridge([(380.0, 1.0), (780.0, 1.0)], settings=settings)) == 401


def test_ridge_outline() -> None:
    ridge = locus.spectrum_ridge(generate_gaussian_spectrum(550, 40))
    outline = locus.ridge_outline(ridge)

    assert outline.shape == (2 * len(ridge), 2)
    assert tuple(outline[0]) == (ridge[0].x, ridge[0].y)
    assert tuple(outline[-1]) == (ridge[0].base_x, ridge[0].base_y)


# ----------------------------- peak tracking --------------------------

def test_subsample_peak_index() -> None:
    assert locus.subsample_peak_index([0.0, 1.0, 0.0]) == pytest.approx(1.0)
    assert locus.subsample_peak_index([0.0, 1.0, 0.5]) == pytest.approx(1 + 1 / 6)
    assert locus.subsample_peak_index([0.5, 1.0, 0.0]) == pytest.approx(1 - 1 / 6)


def test_subsample_peak_index_edges_and_flat_top() -> None:
    assert locus.subsample_peak_index([1.0, 0.5, 0.0]) == 0.0
    assert locus.subsample_peak_index([0.0, 0.5, 1.0]) == 2.0
    assert locus.subsample_peak_index([1.0 - 1e-12, 1.0, 1.0]) == 1.0

    assert locus.subsample_peak_index([]) == 0.0


def test_fractional_index_is_plain_float() -> None:
    marker = locus.track_peak([(500.0, 0.5), (510.0, 1.0), (520.0, 0.2)])

    assert type(marker.fractional_index) is float
    assert type(locus.subsample_peak_index([0.5, 1.0, 0.2])) is float


def test_track_peak_duplicates_match_analyzer() -> None:
    spectrum = [(500.0, 1.0), (500.0, 5.0), (510.0, 0.2), (490.0, 0.1)]
    marker = locus.track_peak(spectrum)
    result = analyze_spectrum(spectrum)

    assert result.peak_intensity == 1.0
    assert result.peak_wavelength == 500.0
    assert marker.intensity == pytest.approx(1.0, abs=0.05)
    assert marker.wavelength == pytest.approx(result.peak_wavelength, abs=1.0)


def test_locus_position_at() -> None:
    anchors = spectral_locus_xy()

    x, y, nx, ny = locus.locus_position_at(550.0)
    assert (x, y) == pytest.approx((0.3016, 0.6923))
    assert np.hypot(nx, ny) == pytest.approx(1.0)

    x, y, _, _ = locus.locus_position_at(552.5)
    assert (x, y) == pytest.approx(((0.3016 + 0.3373) / 2, (0.6923 + 0.6589) / 2))

    assert locus.locus_position_at(300.0)[:2] == pytest.approx(tuple(anchors[0, 1:]))
    assert locus.locus_position_at(900.0)[:2] == pytest.approx(tuple(anchors[-1, 1:]))


def test_track_peak_subsample() -> None:
    marker = locus.track_peak(generate_gaussian_spectrum(530.4, 50))

    assert marker.wavelength == pytest.approx(530.4, abs=0.01)
    assert marker.intensity == pytest.approx(1.0, abs=1e-3)
    assert np.hypot(marker.nx, marker.ny) == pytest.approx(1.0)
    assert (marker.x, marker.y, marker.nx, marker.ny) == pytest.approx(locus.locus_position_at(marker.wavelength))


def test_track_peak_moves_continuously() -> None:
    spectrum = generate_gaussian_spectrum(530, 50)
    shifts = np.linspace(0.0, 5.0, 51)
    markers = [locus.track_peak(spectrum, s) for s in shifts]

    np.testing.assert_allclose([m.wavelength for m in markers], 530.0 + shifts, atol=1e-9)
    xy = np.array([(m.x, m.y) for m in markers])
    steps = np.hypot(*np.diff(xy, axis=0).T)
    assert np.all(steps < 5e-3)


def test_track_peak_empty_and_uv() -> None:
    assert locus.track_peak([]) is None

    marker = locus.track_peak(generate_gaussian_spectrum(600, 30), mode="CIE1976")
    assert marker.wavelength == pytest.approx(600.0)
    assert (marker.x, marker.y) == pytest.approx(locus.locus_position_at(600.0, "CIE1976")[:2])
