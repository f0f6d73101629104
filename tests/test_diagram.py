from __future__ import annotations

import numpy as np
import pytest

import spectrolocus as sl
from spectrolocus import diagram
from spectrolocus.datatypes import DiagramMode
from spectrolocus.processing import shift_spectrum


def test_calculate_chromaticity() -> None:
    spectrum = sl.get_preset("green")
    result = diagram.calculate_chromaticity(spectrum)

    assert result.xyz.Y == pytest.approx(100.0)
    assert result.cie1931 == sl.xyz_to_xy(result.xyz)
    assert result.cie1976 == sl.xyz_to_uv(result.xyz)
    assert result.dominant_wavelength == 530.0
    assert result.hex_color == sl.xyz_to_hex(result.xyz)


def test_compute_frame_cie1931() -> None:
    spectrum = sl.get_preset("green")
    frame = diagram.compute_frame(spectrum, enabled_gamuts=["sRGB", "BT.2020"])

    assert frame.mode is DiagramMode.CIE1931
    assert frame.current_point == tuple(frame.chromaticity.cie1931)
    assert frame.analysis.peak_wavelength == 530.0
    assert frame.peak.wavelength == pytest.approx(530.0)
    assert len(frame.locus) == 401
    assert len(frame.ridge) == 321
    assert set(frame.gamuts) == {"sRGB", "BT.2020"}
    np.testing.assert_allclose(frame.gamuts["sRGB"][0], [0.64, 0.33])


def test_compute_frame_cie1976() -> None:
    frame = diagram.compute_frame(sl.get_preset("red"), mode="CIE1976", enabled_gamuts=["sRGB"])

    assert frame.mode is DiagramMode.CIE1976
    assert frame.current_point == tuple(frame.chromaticity.cie1976)
    np.testing.assert_allclose(frame.gamuts["sRGB"][0], sl.xy_to_uv((0.64, 0.33)))
    np.testing.assert_allclose([frame.locus[0].x, frame.locus[0].y], sl.anchor_positions("CIE1976")[0, 1:])


def test_compute_frame_shift() -> None:
    spectrum = sl.get_preset("blue")
    frame = diagram.compute_frame(spectrum, shift_nm=10.0)

    expected = diagram.calculate_chromaticity(shift_spectrum(spectrum, 10.0))
    assert frame.chromaticity == expected
    assert frame.analysis.peak_wavelength == 480.0
    assert frame.peak.wavelength == pytest.approx(480.0)
    assert sl.ridge_peak(frame.ridge).wavelength == 480.0


def test_compute_frame_empty_spectrum() -> None:
    frame = diagram.compute_frame([])

    assert frame.ridge == []
    assert frame.peak is None
    assert frame.current_point == tuple(sl.D65_XY)


def test_bad_arguments() -> None:
    with pytest.raises(ValueError):
        diagram.compute_frame(sl.get_preset("green"), mode="CIE1960")
    with pytest.raises(ValueError):
        diagram.gamut_triangles(["Rec.709"])


def test_helpers() -> None:
    assert diagram.convert_to_mode((0.3127, 0.3290), "CIE1931") == (0.3127, 0.3290)
    assert diagram.diagram_bounds("CIE1976") == {"x_min": -0.02, "x_max": 0.65, "y_min": -0.02, "y_max": 0.62}
    assert diagram.spectral_locus_in_mode().shape == (81, 3)

    line = diagram.purple_line()
    np.testing.assert_allclose(line, [[0.1741, 0.0050], [0.7347, 0.2653]])


def test_clamp_shift() -> None:
    assert diagram.clamp_shift(150.0) == pytest.approx(100.0)
    assert diagram.clamp_shift(-250.0) == pytest.approx(-100.0)
    assert diagram.clamp_shift(12.34) == pytest.approx(12.3)
    assert diagram.clamp_shift(-0.26) == pytest.approx(-0.3)
