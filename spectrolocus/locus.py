# -*- coding: utf-8 -*-
"""
Geometry of the spectral locus and of the "spectrum on locus" ridge.

    - natural cubic spline through the 81 locus anchors (x and y fitted
      independently against wavelength)
    - 1 nm high-resolution locus
    - outward unit normals along the locus
    - ridge: locus points pushed outward in proportion to the spectrum
      intensity at their wavelength
    - sub-sample tracking of the spectral peak on the locus

Everything works in either CIE 1931 xy or CIE 1976 u'v' (``DiagramMode``).
"""

import logging as _logging
import numpy as _np
from functools import lru_cache as _lru_cache
from typing import List as _List, Optional as _Optional, Tuple as _Tuple, Union as _Union

from .chromaticity import xy_to_uv
from .datatypes import (CubicSplineSegment, DiagramMode, LocusPoint,
                        PeakMarker, RidgePoint)
from .reference_data import spectral_locus_xy
from .settings import DEFAULT_SETTINGS, LocusSettings
from .utils import _coerce_mode, _sorted_spectrum, _unique_sorted

__all__ = ['fit_natural_cubic_spline',
           'evaluate_spline',
           'LocusSpline',
           'anchor_positions',
           'high_resolution_locus',
           'outward_normal',
           'locus_normals',
           'spectrum_intensity_at',
           'spectrum_ridge',
           'ridge_outline',
           'ridge_peak',
           'subsample_peak_index',
           'locus_position_at',
           'track_peak']

_logger = _logging.getLogger(__name__)

# ------------------------------ spline --------------------------------

def _spline_coefficients(knots, values) -> _np.ndarray:
    '''
    Natural cubic spline coefficients as an array of shape (n_segments, 4)
    with columns a, b, c, d.
    '''
    t = _np.asarray(knots, dtype=float)
    a = _np.asarray(values, dtype=float)

    if t.ndim != 1 or t.shape != a.shape:
        raise ValueError("knots and values must be 1D arrays of the same length.")
    if t.size < 2:
        raise ValueError("at least two knots are needed to fit a spline.")

    h = _np.diff(t)
    if _np.any(h <= 0):
        raise ValueError("knots must be strictly increasing.")

    n = t.size - 1

    # right-hand side from second finite differences
    alpha = _np.zeros(n + 1)
    for i in range(1, n):
        alpha[i] = 3/h[i]*(a[i + 1] - a[i]) - 3/h[i - 1]*(a[i] - a[i - 1])

    # Thomas algorithm, natural end conditions (c_0 = c_n = 0)
    l = _np.ones(n + 1)
    mu = _np.zeros(n + 1)
    z = _np.zeros(n + 1)
    for i in range(1, n):
        l[i] = 2*(t[i + 1] - t[i - 1]) - h[i - 1]*mu[i - 1]
        mu[i] = h[i]/l[i]
        z[i] = (alpha[i] - h[i - 1]*z[i - 1])/l[i]

    b = _np.zeros(n)
    c = _np.zeros(n + 1)
    d = _np.zeros(n)
    for j in range(n - 1, -1, -1):
        c[j] = z[j] - mu[j]*c[j + 1]
        b[j] = (a[j + 1] - a[j])/h[j] - h[j]*(c[j + 1] + 2*c[j])/3
        d[j] = (c[j + 1] - c[j])/(3*h[j])

    return _np.column_stack((a[:-1], b, c[:-1], d))

def fit_natural_cubic_spline(knots, values) -> _List[CubicSplineSegment]:
    """
    Fit a natural cubic spline (zero second derivative at both ends).

    Parameters
    ----------
    knots : array_like, shape (N,)
        Strictly increasing abscissae, N >= 2.
    values : array_like, shape (N,)
        Ordinates at the knots.

    Returns
    -------
    list of CubicSplineSegment, length N - 1
        Segment i is S_i(t) = a + b*dt + c*dt**2 + d*dt**3 with
        dt = t - knots[i].

    Raises
    ------
    ValueError
        If the knots are not strictly increasing or fewer than two.

    Notes
    -----
    The tridiagonal system for the curvature terms c is solved with the
    Thomas algorithm (forward elimination with l, mu, z then back
    substitution); b and d follow from c and the ordinates.
    """
    coef = _spline_coefficients(knots, values)
    return [CubicSplineSegment(*map(float, row)) for row in coef]

def evaluate_spline(knots, segments, t):
    '''
    Evaluate a piecewise cubic at ``t``.

    The segment is located by binary search over ``knots`` and evaluated in
    Horner form. ``t`` is clamped to [knots[0], knots[-1]].

    Parameters
    ----------
    knots : array_like, shape (N,)
    segments : sequence of CubicSplineSegment or ndarray, shape (N - 1, 4)
    t : float or ndarray

    Returns
    -------
    float or ndarray
    '''
    knots = _np.asarray(knots, dtype=float)
    coef = _np.asarray(segments, dtype=float).reshape(-1, 4)
    scalar = _np.ndim(t) == 0

    tt = _np.clip(_np.atleast_1d(_np.asarray(t, dtype=float)), knots[0], knots[-1])
    idx = _np.searchsorted(knots, tt, side='right') - 1
    idx = _np.clip(idx, 0, coef.shape[0] - 1)

    dt = tt - knots[idx]
    a, b, c, d = coef[idx, 0], coef[idx, 1], coef[idx, 2], coef[idx, 3]
    out = a + dt*(b + dt*(c + dt*d))

    return float(out[0]) if scalar else out

@_lru_cache(maxsize=None)
def _anchor_array(mode: DiagramMode) -> _np.ndarray:
    table = spectral_locus_xy()
    if mode is DiagramMode.CIE1931:
        return table

    uv = _np.array([xy_to_uv((x, y)) for x, y in table[:, 1:]])
    out = _np.column_stack((table[:, 0], uv))
    out.flags.writeable = False
    return out

def anchor_positions(mode: _Union[str, DiagramMode] = DiagramMode.CIE1931) -> _np.ndarray:
    '''
    The 81 locus anchors in the working space of ``mode``.

    Returns
    -------
    ndarray, shape (81, 3)
        Columns: wavelength (nm), x, y (or u', v'). Read-only.
    '''
    return _anchor_array(_coerce_mode(mode))


class LocusSpline:
    """
    Natural cubic spline through the locus anchors of one working space.

    Parameters
    ----------
    mode : DiagramMode or str
        'CIE1931' fits the xy anchors, 'CIE1976' fits the anchors after
        conversion to u'v'.

    Examples
    --------
    >>> spline = LocusSpline('CIE1931')
    >>> x, y = spline(550.0)
    """

    def __init__(self, mode=DiagramMode.CIE1931):
        self.mode = _coerce_mode(mode)
        anchors = anchor_positions(self.mode)
        self.knots = anchors[:, 0]
        self.segments_x = fit_natural_cubic_spline(self.knots, anchors[:, 1])
        self.segments_y = fit_natural_cubic_spline(self.knots, anchors[:, 2])
        self._coef_x = _np.asarray(self.segments_x)
        self._coef_y = _np.asarray(self.segments_y)
        _logger.debug("Fitted %s locus spline on %d anchors", self.mode.value, self.knots.size)

    @property
    def wavelength_range(self) -> _Tuple[float, float]:
        return float(self.knots[0]), float(self.knots[-1])

    def __call__(self, wavelength):
        return (evaluate_spline(self.knots, self._coef_x, wavelength),
                evaluate_spline(self.knots, self._coef_y, wavelength))

    def __repr__(self):
        return f"LocusSpline(mode={self.mode.value!r}, knots={self.knots.size})"


@_lru_cache(maxsize=None)
def _locus_spline(mode: DiagramMode) -> LocusSpline:
    return LocusSpline(mode)

@_lru_cache(maxsize=8)
def _high_res_array(mode: DiagramMode, step: float) -> _np.ndarray:
    spline = _locus_spline(mode)
    lo, hi = spline.wavelength_range
    n = int(_np.floor((hi - lo)/step + 1e-9)) + 1
    wl = lo + step*_np.arange(n)
    x, y = spline(wl)
    out = _np.column_stack((wl, x, y))
    out.flags.writeable = False
    return out

def high_resolution_locus(mode=DiagramMode.CIE1931, step: float = 1.0) -> _List[LocusPoint]:
    """
    Smooth locus polyline sampled every ``step`` nm from 380 to 780 nm.

    Parameters
    ----------
    mode : DiagramMode or str, optional
    step : float, optional
        Sampling interval in nm (default 1).

    Returns
    -------
    list of LocusPoint
        Passes through every anchor at its own wavelength whenever the
        anchor wavelengths fall on the sampling grid.
    """
    if step <= 0:
        raise ValueError("step must be > 0.")
    arr = _high_res_array(_coerce_mode(mode), float(step))
    return [LocusPoint(*map(float, row)) for row in arr]

# ------------------------------ normals -------------------------------

def _orient(nx, ny, px, py, interior):
    '''
    flip (nx, ny) where it points toward the interior reference
    '''
    to_x = interior[0] - px
    to_y = interior[1] - py
    flip = nx*to_x + ny*to_y > 0
    return _np.where(flip, -nx, nx), _np.where(flip, -ny, ny)

def _normals(xy, interior) -> _np.ndarray:
    xy = _np.asarray(xy, dtype=float).reshape(-1, 2)
    n = xy.shape[0]
    if n == 0:
        return _np.empty((0, 2))

    idx = _np.arange(n)
    prev = xy[_np.maximum(idx - 1, 0)]
    nxt = xy[_np.minimum(idx + 1, n - 1)]

    tangent = nxt - prev
    length = _np.hypot(tangent[:, 0], tangent[:, 1])
    degenerate = length < 1e-15
    safe = _np.where(degenerate, 1.0, length)

    nx = -tangent[:, 1]/safe
    ny = tangent[:, 0]/safe
    nx, ny = _orient(nx, ny, xy[:, 0], xy[:, 1], interior)

    if _np.any(degenerate):
        # no tangent: point straight away from the interior reference
        rx = xy[:, 0] - interior[0]
        ry = xy[:, 1] - interior[1]
        rlen = _np.hypot(rx, ry)
        radial_ok = rlen > 1e-15
        rlen = _np.where(radial_ok, rlen, 1.0)
        fx = _np.where(radial_ok, rx/rlen, 0.0)
        fy = _np.where(radial_ok, ry/rlen, -1.0)
        nx = _np.where(degenerate, fx, nx)
        ny = _np.where(degenerate, fy, ny)

    return _np.column_stack((nx, ny))

def outward_normal(prev, curr, nxt, interior=DEFAULT_SETTINGS.interior_reference) -> _Tuple[float, float]:
    """
    Unit normal at ``curr`` pointing away from the locus interior.

    The tangent is ``nxt - prev``; the candidate normal (-dy, dx)/|d| is
    flipped when it points toward ``interior``. A zero-length tangent gives
    the direction from ``interior`` to ``curr``.

    Parameters
    ----------
    prev, curr, nxt : (x, y)
        Consecutive locus points.
    interior : (x, y), optional
        Approximate interior reference of the horseshoe.

    Returns
    -------
    (nx, ny)
    """
    normals = _normals(_np.array([prev, curr, nxt], dtype=float), interior)
    # middle row: tangent computed from prev and nxt
    return float(normals[1, 0]), float(normals[1, 1])

def locus_normals(points, interior=DEFAULT_SETTINGS.interior_reference) -> _np.ndarray:
    '''
    Outward unit normals along a locus polyline.

    Parameters
    ----------
    points : sequence of LocusPoint, or ndarray of shape (N, 2) or (N, 3)
        For 3 columns the first is taken as wavelength and ignored.
    interior : (x, y), optional

    Returns
    -------
    ndarray, shape (N, 2)
        Neighbors are clamped at the ends of the sequence.
    '''
    arr = _np.asarray(points, dtype=float)
    if arr.size == 0:
        return _np.empty((0, 2))
    if arr.ndim == 2 and arr.shape[1] == 3:
        arr = arr[:, 1:]
    return _normals(arr, interior)

# ------------------------------- ridge --------------------------------

def spectrum_intensity_at(spectrum, wavelength, shift_nm: float = 0.0):
    '''
    Intensity of the shifted spectrum at ``wavelength``.

    Looks up the unshifted spectrum at ``wavelength - shift_nm`` with linear
    interpolation between bracketing samples; zero outside the sampled range
    (and for spectra with fewer than two distinct wavelengths).

    Parameters
    ----------
    spectrum : spectrum-like
    wavelength : float or ndarray
        nm.
    shift_nm : float, optional

    Returns
    -------
    float or ndarray
    '''
    lam, inten = _unique_sorted(spectrum)
    target = _np.asarray(wavelength, dtype=float) - shift_nm

    if lam.size < 2:
        out = _np.zeros_like(target)
    else:
        out = _np.interp(target, lam, inten, left=0.0, right=0.0)

    return float(out) if _np.ndim(out) == 0 else out

def spectrum_ridge(spectrum,
                   shift_nm: float = 0.0,
                   intensity_scale: float = 1.0,
                   mode=DiagramMode.CIE1931,
                   settings: LocusSettings = DEFAULT_SETTINGS) -> _List[RidgePoint]:
    """
    Push the locus outward in proportion to the spectrum intensity.

    Parameters
    ----------
    spectrum : spectrum-like
        Unshifted spectrum.
    shift_nm : float, optional
        Wavelength shift; the locus point at wavelength w shows the spectrum
        at w - shift_nm.
    intensity_scale : float, optional
        User gain on the ridge height (typically 0.1-2).
    mode : DiagramMode or str, optional
    settings : LocusSettings, optional
        Ridge band, per-mode base scale (0.08 xy / 0.06 u'v' by default),
        interior reference and locus sampling step.

    Returns
    -------
    list of RidgePoint
        One per high-resolution locus point inside the ridge band. Empty
        for an empty spectrum. Zero intensity leaves the point on the locus.

    Notes
    -----
    Normals are computed on the band-limited locus, so the neighbors of the
    first and last ridge points are clamped at the band ends.
    """
    lam, _ = _sorted_spectrum(spectrum)
    if lam.size == 0:
        return []

    mode = _coerce_mode(mode)
    locus = _high_res_array(mode, float(settings.locus_step))
    band = (locus[:, 0] >= settings.ridge_min_wavelength) & (locus[:, 0] <= settings.ridge_max_wavelength)
    locus = locus[band]
    if locus.shape[0] == 0:
        return []

    normals = _normals(locus[:, 1:], settings.interior_reference)
    intensity = _np.atleast_1d(spectrum_intensity_at(spectrum, locus[:, 0], shift_nm))
    distance = intensity*settings.ridge_scale(mode)*intensity_scale

    x = locus[:, 1] + normals[:, 0]*distance
    y = locus[:, 2] + normals[:, 1]*distance

    return [RidgePoint(float(bx), float(by), float(px), float(py), float(wl), float(i))
            for bx, by, px, py, wl, i in zip(locus[:, 1], locus[:, 2], x, y, locus[:, 0], intensity)]

def ridge_outline(ridge) -> _np.ndarray:
    '''
    Closed ribbon polygon of a ridge: extruded edge from first to last
    point, then the locus base back to the start.

    Returns
    -------
    ndarray, shape (2*N, 2)
    '''
    if len(ridge) == 0:
        return _np.empty((0, 2))
    arr = _np.asarray(ridge, dtype=float)
    top = arr[:, 2:4]
    base = arr[::-1, 0:2]
    return _np.vstack((top, base))

def ridge_peak(ridge) -> _Optional[RidgePoint]:
    '''
    Ridge point of highest intensity (earliest on ties), None if empty.
    '''
    best = None
    for p in ridge:
        if best is None or p.intensity > best.intensity:
            best = p
    return best

# ----------------------------- peak tracking --------------------------

def _parabolic_vertex(intensity, threshold):
    '''
    (fractional index, vertex intensity) of the maximum sample
    '''
    inten = _np.asarray(intensity, dtype=float)
    i = 0
    for k in range(1, inten.size):
        if inten[k] > inten[i]:
            i = k

    if i == 0 or i == inten.size - 1:
        return float(i), float(inten[i])

    left, mid, right = inten[i - 1], inten[i], inten[i + 1]
    den = left - 2*mid + right
    if abs(den) < threshold:
        return float(i), float(mid)

    offset = 0.5*(left - right)/den
    offset = min(0.5, max(-0.5, offset))
    value = mid + 0.5*(right - left)*offset + 0.5*den*offset**2
    return float(i + offset), float(value)

def subsample_peak_index(intensity, threshold: float = DEFAULT_SETTINGS.flat_peak_threshold) -> float:
    """
    Fractional sample index of the intensity maximum.

    A parabola through the maximum sample (earliest on ties) and its two
    neighbors gives the vertex offset

        0.5*(I[-1] - I[+1])/(I[-1] - 2*I[0] + I[+1])

    clamped to [-0.5, 0.5]. End samples, and flat tops whose second
    difference is below ``threshold`` in magnitude, return the integer index.

    Parameters
    ----------
    intensity : array_like
        Intensities sorted by wavelength.
    threshold : float, optional

    Returns
    -------
    float
        0 for an empty input.
    """
    inten = _np.asarray(intensity, dtype=float)
    if inten.size == 0:
        return 0.0
    return _parabolic_vertex(inten, threshold)[0]

@_lru_cache(maxsize=None)
def _anchor_normals(mode: DiagramMode, interior: _Tuple[float, float]) -> _np.ndarray:
    out = _normals(anchor_positions(mode)[:, 1:], interior)
    out.flags.writeable = False
    return out

def locus_position_at(wavelength: float,
                      mode=DiagramMode.CIE1931,
                      settings: LocusSettings = DEFAULT_SETTINGS) -> _Tuple[float, float, float, float]:
    """
    Position and outward normal on the anchor polyline at any wavelength.

    The bracketing anchors are found by binary search; position and normal
    are linearly interpolated between them and the normal is renormalized.
    Wavelengths outside 380-780 nm clamp to the table ends.

    Parameters
    ----------
    wavelength : float
        nm, may be fractional.
    mode : DiagramMode or str, optional
    settings : LocusSettings, optional

    Returns
    -------
    (x, y, nx, ny)
    """
    mode = _coerce_mode(mode)
    anchors = anchor_positions(mode)
    normals = _anchor_normals(mode, settings.interior_reference)
    wl = anchors[:, 0]

    w = min(max(float(wavelength), float(wl[0])), float(wl[-1]))
    i = int(_np.searchsorted(wl, w, side='right')) - 1
    i = min(max(i, 0), wl.size - 2)
    t = (w - wl[i])/(wl[i + 1] - wl[i])

    x = anchors[i, 1] + t*(anchors[i + 1, 1] - anchors[i, 1])
    y = anchors[i, 2] + t*(anchors[i + 1, 2] - anchors[i, 2])

    n = (1 - t)*normals[i] + t*normals[i + 1]
    length = _np.hypot(n[0], n[1])
    if length < 1e-12:
        # opposite normals cancel; keep the nearer anchor's
        n = normals[i] if t < 0.5 else normals[i + 1]
        length = 1.0

    return float(x), float(y), float(n[0]/length), float(n[1]/length)

def track_peak(spectrum,
               shift_nm: float = 0.0,
               mode=DiagramMode.CIE1931,
               settings: LocusSettings = DEFAULT_SETTINGS) -> _Optional[PeakMarker]:
    """
    Continuous position of the spectral peak on the locus.

    The discrete maximum is refined with a 3-point parabola (see
    ``subsample_peak_index``); the fractional sample index is mapped to a
    wavelength by linear interpolation between neighboring samples, shifted
    by ``shift_nm`` and placed on the anchor polyline with
    ``locus_position_at``. As the shift changes continuously so does the
    marker, rather than jumping between samples.

    Parameters
    ----------
    spectrum : spectrum-like
        Unshifted spectrum; duplicated wavelengths keep their first sample.
    shift_nm : float, optional
    mode : DiagramMode or str, optional
    settings : LocusSettings, optional

    Returns
    -------
    PeakMarker or None
        None for an empty spectrum.
    """
    lam, inten = _unique_sorted(spectrum)
    if lam.size == 0:
        return None

    frac, value = _parabolic_vertex(inten, settings.flat_peak_threshold)
    peak_wl = float(_np.interp(frac, _np.arange(lam.size), lam)) + shift_nm

    x, y, nx, ny = locus_position_at(peak_wl, mode, settings)
    return PeakMarker(peak_wl, x, y, nx, ny, value, frac)
