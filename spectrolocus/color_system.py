# color_system.py
# -*- coding: utf-8 -*-
"""
XYZ -> sRGB display colors and the approximate wavelength color ramp used
to paint the spectral locus.
"""

import colour as _clr
import numpy as _np
from typing import Tuple

from .datatypes import RGBColor
from .colorimetry import spectrum_to_xyz

__all__ = ['XYZ_TO_SRGB',
           'srgb_gamma',
           'linear_srgb',
           'xyz_to_rgb',
           'rgb_to_hex',
           'xyz_to_hex',
           'is_in_srgb_gamut',
           'get_displayable_color',
           'spectrum_to_hex',
           'wavelength_to_approx_rgb',
           'wavelength_to_css']

# XYZ -> linear sRGB (D65 white)
XYZ_TO_SRGB = _np.array([
    [ 3.2406, -1.5372, -0.4986],
    [-0.9689,  1.8758,  0.0415],
    [ 0.0557, -0.2040,  1.0570],
])
XYZ_TO_SRGB.flags.writeable = False

# ---------------------------- helpers ---------------------------------

def srgb_gamma(linear):
    '''
    sRGB transfer function (linear -> encoded). Works on scalars and arrays.
    '''
    return _np.asarray(_clr.cctf_encoding(_np.asarray(linear, dtype=float), function='sRGB'))

def linear_srgb(xyz) -> _np.ndarray:
    '''
    Unclamped linear sRGB of an XYZ color on the Y = 100 scale.
    '''
    return XYZ_TO_SRGB @ (_np.asarray(xyz, dtype=float)/100.0)

def _to_8bit(values) -> Tuple[int, int, int]:
    rgb255 = (_np.clip(values, 0.0, 1.0)*255.0 + 0.5).astype(int)
    return int(rgb255[0]), int(rgb255[1]), int(rgb255[2])

# ----------------------------- API ------------------------------------

def xyz_to_rgb(xyz) -> RGBColor:
    """
    Convert XYZ (Y normalized to 100) into an 8-bit sRGB display color.

    Out-of-gamut colors are clipped channel by channel after gamma encoding,
    so a color is always returned. Use ``is_in_srgb_gamut`` to know whether
    clipping happened.
    """
    return RGBColor(*_to_8bit(srgb_gamma(linear_srgb(xyz))))

def rgb_to_hex(r, g, b) -> str:
    '''
    Upper-case ``#RRGGBB`` string; channels are clamped to [0, 255].
    '''
    r, g, b = (int(min(255, max(0, round(c)))) for c in (r, g, b))
    return f"#{r:02X}{g:02X}{b:02X}"

def xyz_to_hex(xyz) -> str:
    return rgb_to_hex(*xyz_to_rgb(xyz))

def is_in_srgb_gamut(xyz, tolerance: float = 0.001) -> bool:
    '''
    True if the unclamped linear sRGB channels of ``xyz`` lie in
    [-tolerance, 1 + tolerance].
    '''
    rgb = linear_srgb(xyz)
    return bool(_np.all((rgb >= -tolerance) & (rgb <= 1 + tolerance)))

def get_displayable_color(xyz) -> str:
    return xyz_to_hex(xyz)

def spectrum_to_hex(spectrum) -> Tuple[str, Tuple[float, float, float], Tuple[int, int, int]]:
    """
    Convert an emission spectrum into an sRGB colour.

    Parameters
    ----------
    spectrum : spectrum-like
        (wavelength [nm], intensity) samples of a self-luminous source.
        The absolute scale does not affect the result (Y is normalised
        to 100 before conversion).

    Returns
    -------
    hex_color : str
        HTML hex colour, e.g. "#60FF96".

    rgb01 : Tuple[float, float, float]
        sRGB components as floats in [0,1], **including** the sRGB transfer function (gamma).

    rgb255 : Tuple[int, int, int]
        sRGB components quantised to 8-bit integers [0,255].
    """
    xyz = spectrum_to_xyz(spectrum, normalize=True)
    rgb = _np.clip(srgb_gamma(linear_srgb(xyz)), 0.0, 1.0)
    rgb255 = _to_8bit(rgb)
    return rgb_to_hex(*rgb255), (float(rgb[0]), float(rgb[1]), float(rgb[2])), rgb255

def wavelength_to_approx_rgb(wavelength: float) -> RGBColor:
    """
    Approximate display color of monochromatic light.

    Piecewise-linear ramp violet -> blue -> cyan -> green -> yellow -> red,
    dimmed toward the ends of the visible range (below 420 nm and above
    700 nm) and gamma adjusted with exponent 0.8. This is a perceptual
    approximation for painting the locus, not a colorimetric conversion;
    use ``monochromatic_to_xyz`` + ``xyz_to_rgb`` for that.

    Parameters
    ----------
    wavelength : float
        wavelength in nm. Outside 380-780 nm the color is black.

    Returns
    -------
    RGBColor
    """
    wl = float(wavelength)
    r = g = b = 0.0

    if 380 <= wl < 440:
        r, g, b = -(wl - 440)/(440 - 380), 0.0, 1.0
    elif 440 <= wl < 490:
        r, g, b = 0.0, (wl - 440)/(490 - 440), 1.0
    elif 490 <= wl < 510:
        r, g, b = 0.0, 1.0, -(wl - 510)/(510 - 490)
    elif 510 <= wl < 580:
        r, g, b = (wl - 510)/(580 - 510), 1.0, 0.0
    elif 580 <= wl < 645:
        r, g, b = 1.0, -(wl - 645)/(645 - 580), 0.0
    elif 645 <= wl <= 780:
        r, g, b = 1.0, 0.0, 0.0

    # intensity roll-off at the edges of vision
    factor = 1.0
    if 380 <= wl < 420:
        factor = 0.3 + 0.7*(wl - 380)/(420 - 380)
    elif 700 <= wl <= 780:
        factor = 0.3 + 0.7*(780 - wl)/(780 - 700)

    channels = [int(_np.floor(255*(c*factor)**0.8 + 0.5)) for c in (r, g, b)]
    return RGBColor(*channels)

def wavelength_to_css(wavelength: float) -> str:
    return "rgb({},{},{})".format(*wavelength_to_approx_rgb(wavelength))
