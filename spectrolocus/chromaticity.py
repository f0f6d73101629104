# -*- coding: utf-8 -*-
"""
Chromaticity coordinate conversions between XYZ, CIE 1931 xy and
CIE 1976 u'v', plus point-in-gamut testing.

Degenerate denominators fall back to the D65 white point of the target
space, so no conversion returns NaN or infinity.
"""

import math as _math
from typing import Sequence as _Sequence

from .datatypes import CIE1931Coordinates, CIE1976Coordinates
from .reference_data import D65_XY, D65_UV
from .utils import _EPS

__all__ = ['xyz_to_xy',
           'xyz_to_uv',
           'xy_to_uv',
           'uv_to_xy',
           'color_difference_uv',
           'is_in_gamut']

def xyz_to_xy(xyz) -> CIE1931Coordinates:
    '''
    x = X/(X + Y + Z), y = Y/(X + Y + Z)
    '''
    X, Y, Z = xyz
    total = X + Y + Z
    if abs(total) < _EPS:
        return D65_XY
    return CIE1931Coordinates(X/total, Y/total)

def xyz_to_uv(xyz) -> CIE1976Coordinates:
    '''
    u' = 4X/(X + 15Y + 3Z), v' = 9Y/(X + 15Y + 3Z)
    '''
    X, Y, Z = xyz
    den = X + 15*Y + 3*Z
    if abs(den) < _EPS:
        return D65_UV
    return CIE1976Coordinates(4*X/den, 9*Y/den)

def xy_to_uv(xy) -> CIE1976Coordinates:
    '''
    u' = 4x/(-2x + 12y + 3), v' = 9y/(-2x + 12y + 3)
    '''
    x, y = xy
    den = -2*x + 12*y + 3
    if abs(den) < _EPS:
        return D65_UV
    return CIE1976Coordinates(4*x/den, 9*y/den)

def uv_to_xy(uv) -> CIE1931Coordinates:
    '''
    x = 9u'/(6u' - 16v' + 12), y = 4v'/(6u' - 16v' + 12)
    '''
    u, v = uv
    den = 6*u - 16*v + 12
    if abs(den) < _EPS:
        return D65_XY
    return CIE1931Coordinates(9*u/den, 4*v/den)

def color_difference_uv(uv1, uv2) -> float:
    """
    Euclidean distance between two u'v' chromaticities.

    This is a geometric distance on the UCS diagram, not a perceptual
    Delta-E (no lightness term, no CIE94/CIEDE2000 weighting).
    """
    du = uv1[0] - uv2[0]
    dv = uv1[1] - uv2[1]
    return _math.hypot(du, dv)

def is_in_gamut(point, gamut_vertices: _Sequence) -> bool:
    """
    Point-in-triangle test with barycentric coordinates.

    Parameters
    ----------
    point : (x, y)
        Chromaticity to test.
    gamut_vertices : sequence of three (x, y)
        Triangle primaries, any winding.

    Returns
    -------
    bool
        True if all barycentric weights lie in [0, 1] (edges and vertices
        count as inside). False for anything other than three vertices or
        for a zero-area triangle.
    """
    if len(gamut_vertices) != 3:
        return False

    (x1, y1), (x2, y2), (x3, y3) = gamut_vertices
    px, py = point

    den = (y2 - y3)*(x1 - x3) + (x3 - x2)*(y1 - y3)
    if abs(den) < _EPS:
        return False

    a = ((y2 - y3)*(px - x3) + (x3 - x2)*(py - y3))/den
    b = ((y3 - y1)*(px - x3) + (x1 - x3)*(py - y3))/den
    c = 1 - a - b

    return 0 <= a <= 1 and 0 <= b <= 1 and 0 <= c <= 1
