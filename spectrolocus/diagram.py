# -*- coding: utf-8 -*-
"""
Per-frame entry points for a chromaticity diagram front end.

These combine the colorimetry, analysis and locus geometry routines into
the values a drawing layer consumes: the current color, the locus, the
ridge, the tracked peak and the gamut triangles, all in the active working
space (CIE 1931 xy or CIE 1976 u'v').
"""

import logging as _logging
import numpy as _np
from typing import Dict as _Dict, Iterable as _Iterable, Tuple as _Tuple

from .analysis import analyze_spectrum, get_peak_wavelength
from .chromaticity import xyz_to_xy, xyz_to_uv, xy_to_uv
from .color_system import xyz_to_hex
from .colorimetry import spectrum_to_xyz
from .datatypes import ChromaticityResult, DiagramFrame, DiagramMode
from .locus import anchor_positions, high_resolution_locus, spectrum_ridge, track_peak
from .processing import shift_spectrum
from .reference_data import get_gamut
from .settings import DEFAULT_SETTINGS, LocusSettings
from .utils import _coerce_mode

__all__ = ['calculate_chromaticity',
           'convert_to_mode',
           'spectral_locus_in_mode',
           'gamut_triangles',
           'diagram_bounds',
           'purple_line',
           'clamp_shift',
           'compute_frame']

_logger = _logging.getLogger(__name__)

_BOUNDS = {
    DiagramMode.CIE1931: {'x_min': -0.05, 'x_max': 0.8, 'y_min': -0.05, 'y_max': 0.9},
    DiagramMode.CIE1976: {'x_min': -0.02, 'x_max': 0.65, 'y_min': -0.02, 'y_max': 0.62},
}

def calculate_chromaticity(spectrum) -> ChromaticityResult:
    """
    XYZ (Y = 100), xy, u'v', display color and dominant wavelength of a
    spectrum.

    The dominant wavelength reported here is the wavelength of the highest
    sample, not the CIE hue-line construction.
    """
    xyz = spectrum_to_xyz(spectrum)
    return ChromaticityResult(
        xyz=xyz,
        cie1931=xyz_to_xy(xyz),
        cie1976=xyz_to_uv(xyz),
        dominant_wavelength=get_peak_wavelength(spectrum),
        hex_color=xyz_to_hex(xyz),
    )

def convert_to_mode(xy, mode=DiagramMode.CIE1931) -> _Tuple[float, float]:
    '''
    Map an xy chromaticity into the working space of ``mode``.
    '''
    if _coerce_mode(mode) is DiagramMode.CIE1976:
        u, v = xy_to_uv(xy)
        return float(u), float(v)
    return float(xy[0]), float(xy[1])

def spectral_locus_in_mode(mode=DiagramMode.CIE1931) -> _np.ndarray:
    '''
    Anchor polyline of the locus, shape (81, 3): wavelength, x, y.
    '''
    return anchor_positions(mode)

def gamut_triangles(enabled: _Iterable[str], mode=DiagramMode.CIE1931) -> _Dict[str, _np.ndarray]:
    """
    Gamut triangles in the working space.

    Parameters
    ----------
    enabled : iterable of str
        Gamut identifiers ('sRGB', 'DCI-P3', 'BT.2020', 'AdobeRGB').
    mode : DiagramMode or str, optional

    Returns
    -------
    dict
        identifier -> ndarray of shape (3, 2).

    Raises
    ------
    ValueError
        For an unknown identifier.
    """
    mode = _coerce_mode(mode)
    out = {}
    for name in enabled:
        gamut = get_gamut(name)
        out[name] = _np.array([convert_to_mode(v, mode) for v in gamut.vertices])
    return out

def diagram_bounds(mode=DiagramMode.CIE1931) -> _Dict[str, float]:
    return dict(_BOUNDS[_coerce_mode(mode)])

def purple_line(mode=DiagramMode.CIE1931) -> _np.ndarray:
    '''
    The two locus ends (380 and 780 nm) joined by the line of purples.
    '''
    anchors = anchor_positions(mode)
    return _np.array([anchors[0, 1:], anchors[-1, 1:]])

def clamp_shift(shift_nm: float, limit: float = 100.0, resolution: float = 0.1) -> float:
    '''
    Clamp a requested shift to [-limit, limit] and round it to ``resolution``.
    '''
    clamped = max(-limit, min(limit, float(shift_nm)))
    if resolution <= 0:
        return clamped
    return round(clamped/resolution)*resolution

def compute_frame(spectrum,
                  shift_nm: float = 0.0,
                  intensity_scale: float = 1.0,
                  mode=DiagramMode.CIE1931,
                  enabled_gamuts: _Iterable[str] = ('sRGB',),
                  settings: LocusSettings = DEFAULT_SETTINGS) -> DiagramFrame:
    """
    Recompute everything the diagram shows for one input event.

    Parameters
    ----------
    spectrum : spectrum-like
        Unshifted spectrum.
    shift_nm : float, optional
        Wavelength shift applied to the spectrum.
    intensity_scale : float, optional
        Ridge height gain.
    mode : DiagramMode or str, optional
    enabled_gamuts : iterable of str, optional
    settings : LocusSettings, optional

    Returns
    -------
    DiagramFrame

    Notes
    -----
    Stateless and synchronous; callers throttle how often it runs (for
    example once per animation frame while dragging).
    """
    mode = _coerce_mode(mode)

    chromaticity = calculate_chromaticity(shift_spectrum(spectrum, shift_nm))
    if mode is DiagramMode.CIE1976:
        current = (float(chromaticity.cie1976.u), float(chromaticity.cie1976.v))
    else:
        current = (float(chromaticity.cie1931.x), float(chromaticity.cie1931.y))

    frame = DiagramFrame(
        mode=mode,
        chromaticity=chromaticity,
        analysis=analyze_spectrum(spectrum, shift_nm),
        locus=high_resolution_locus(mode, settings.locus_step),
        ridge=spectrum_ridge(spectrum, shift_nm, intensity_scale, mode, settings),
        peak=track_peak(spectrum, shift_nm, mode, settings),
        gamuts=gamut_triangles(enabled_gamuts, mode),
        current_point=current,
    )
    _logger.debug("Frame %s shift=%.2f nm: %d ridge points", mode.value, shift_nm, len(frame.ridge))
    return frame
