# -*- coding: utf-8 -*-
"""
Value types shared by the colorimetry and locus geometry routines.

Every type here is immutable. Point-like records are NamedTuples so that a
list of them converts straight into a NumPy array of shape (N, k).
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import NamedTuple, Optional, Tuple, List, Dict

import numpy as _np

__all__ = ['SpectrumPoint',
           'XYZColor',
           'CIE1931Coordinates',
           'CIE1976Coordinates',
           'RGBColor',
           'ObserverEntry',
           'LocusAnchor',
           'LocusPoint',
           'CubicSplineSegment',
           'RidgePoint',
           'PeakMarker',
           'Gamut',
           'AnalysisResult',
           'ChromaticityResult',
           'ValidationReport',
           'SpectrumSummary',
           'DiagramMode',
           'DiagramFrame']


class SpectrumPoint(NamedTuple):
    wavelength: float   # nm
    intensity: float


class XYZColor(NamedTuple):
    X: float
    Y: float
    Z: float


class CIE1931Coordinates(NamedTuple):
    x: float
    y: float


class CIE1976Coordinates(NamedTuple):
    """CIE 1976 UCS chromaticity in the primed (u', v') convention."""
    u: float
    v: float


class RGBColor(NamedTuple):
    """8-bit display color, each channel in [0, 255]."""
    r: int
    g: int
    b: int


class ObserverEntry(NamedTuple):
    wavelength: float
    xbar: float
    ybar: float
    zbar: float


class LocusAnchor(NamedTuple):
    wavelength: float
    x: float
    y: float


class LocusPoint(NamedTuple):
    """A point of the spectral locus in the active working space."""
    wavelength: float
    x: float
    y: float


class CubicSplineSegment(NamedTuple):
    """
    Coefficients of S(t) = a + b*d + c*d**2 + d*d**3 on one knot interval,
    with d = t - t_i measured from the left knot.
    """
    a: float
    b: float
    c: float
    d: float


class RidgePoint(NamedTuple):
    base_x: float
    base_y: float
    x: float
    y: float
    wavelength: float
    intensity: float


class PeakMarker(NamedTuple):
    """
    Sub-sample position of the spectral peak on the locus.

    (x, y) lies on the anchor polyline and (nx, ny) is the unit outward
    normal there. ``fractional_index`` is the parabolic vertex position in
    sample units of the sorted spectrum.
    """
    wavelength: float
    x: float
    y: float
    nx: float
    ny: float
    intensity: float
    fractional_index: float


class DiagramMode(str, Enum):
    """Working space of the chromaticity diagram."""
    CIE1931 = 'CIE1931'
    CIE1976 = 'CIE1976'


@dataclass(frozen=True)
class Gamut:
    name: str
    vertices: Tuple[CIE1931Coordinates, ...]
    white_point: CIE1931Coordinates

    def as_array(self) -> _np.ndarray:
        return _np.array(self.vertices, dtype=float)


@dataclass(frozen=True)
class AnalysisResult:
    peak_wavelength: float
    peak_intensity: float
    fwhm: Optional[float] = None
    fwhm_range: Optional[Tuple[float, float]] = None
    fwqm: Optional[float] = None
    fwqm_range: Optional[Tuple[float, float]] = None


@dataclass(frozen=True)
class ChromaticityResult:
    xyz: XYZColor
    cie1931: CIE1931Coordinates
    cie1976: CIE1976Coordinates
    dominant_wavelength: float
    hex_color: str


@dataclass(frozen=True)
class ValidationReport:
    valid: bool
    errors: Tuple[str, ...] = ()
    warnings: Tuple[str, ...] = ()


@dataclass(frozen=True)
class SpectrumSummary:
    points: Tuple[SpectrumPoint, ...]
    min_wavelength: float
    max_wavelength: float
    peak_wavelength: float


@dataclass(frozen=True)
class DiagramFrame:
    """Everything a presentation layer needs to redraw one frame."""
    mode: DiagramMode
    chromaticity: ChromaticityResult
    analysis: AnalysisResult
    locus: List[LocusPoint]
    ridge: List[RidgePoint]
    peak: Optional[PeakMarker]
    gamuts: Dict[str, _np.ndarray] = field(default_factory=dict)
    current_point: Tuple[float, float] = (0.0, 0.0)
