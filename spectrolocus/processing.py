# -*- coding: utf-8 -*-
"""
Spectrum processing: normalization, baseline correction, smoothing,
resampling and wavelength shifting.

All functions are pure: they take a spectrum-like input and return a new
list of SpectrumPoint. Functions whose result depends on sample order
(smoothing, interpolation) sort ascending by wavelength first; the others
keep the input order.
"""

import logging as _logging
import math as _math
import numpy as _np
from typing import List as _List, Optional as _Optional

from .datatypes import SpectrumPoint, ValidationReport, SpectrumSummary
from .reference_data import CIE_MIN_WAVELENGTH, CIE_MAX_WAVELENGTH
from .utils import _as_spectrum_array, _sorted_spectrum, _to_points, _unique_sorted

__all__ = ['normalize_spectrum',
           'normalize_to_range',
           'baseline_correction',
           'smooth_spectrum',
           'deduplicate',
           'clip_negative',
           'interpolate_spectrum',
           'interpolate_to_visible_range',
           'resample_spectrum',
           'extend_to_visible_range',
           'shift_spectrum',
           'shift_spectrum_clamped',
           'validate_spectrum',
           'create_spectrum_data']

_logger = _logging.getLogger(__name__)

# ---------------------------- intensity -------------------------------

def normalize_spectrum(spectrum) -> _List[SpectrumPoint]:
    '''
    Divide all intensities by the maximum intensity. A zero maximum gives
    an all-zero spectrum.
    '''
    arr = _as_spectrum_array(spectrum)
    if arr.shape[0] == 0:
        return []

    peak = _np.max(arr[:, 1])
    if peak == 0:
        return _to_points(arr[:, 0], _np.zeros(arr.shape[0]))
    return _to_points(arr[:, 0], arr[:, 1]/peak)

def normalize_to_range(spectrum, min_value: float = 0.0, max_value: float = 1.0) -> _List[SpectrumPoint]:
    '''
    Affine rescale of intensities onto [min_value, max_value].

    A flat spectrum (zero intensity range) maps to the midpoint of the
    target range.
    '''
    arr = _as_spectrum_array(spectrum)
    if arr.shape[0] == 0:
        return []

    lo, hi = _np.min(arr[:, 1]), _np.max(arr[:, 1])
    span = hi - lo
    if span == 0:
        return _to_points(arr[:, 0], _np.full(arr.shape[0], (min_value + max_value)/2))

    scaled = (arr[:, 1] - lo)/span*(max_value - min_value) + min_value
    return _to_points(arr[:, 0], scaled)

def baseline_correction(spectrum) -> _List[SpectrumPoint]:
    '''
    Subtract the minimum intensity, clamping the result at zero.
    '''
    arr = _as_spectrum_array(spectrum)
    if arr.shape[0] == 0:
        return []
    corrected = _np.maximum(arr[:, 1] - _np.min(arr[:, 1]), 0.0)
    return _to_points(arr[:, 0], corrected)

def clip_negative(spectrum) -> _List[SpectrumPoint]:
    arr = _as_spectrum_array(spectrum)
    return _to_points(arr[:, 0], _np.maximum(arr[:, 1], 0.0))

def smooth_spectrum(spectrum, window_size: int = 3) -> _List[SpectrumPoint]:
    """
    Centered moving average.

    Parameters
    ----------
    spectrum : spectrum-like
    window_size : int, optional
        Number of samples in the window (default 3). Even sizes behave as
        the next odd size down, i.e. ``window_size//2`` neighbors on each
        side. Near the ends the window is truncated to the samples that
        exist, so edge points average fewer neighbors.

    Returns
    -------
    list of SpectrumPoint
        Sorted by wavelength. ``window_size < 1`` returns the sorted input.
    """
    lam, inten = _sorted_spectrum(spectrum)
    if lam.size == 0 or window_size < 1:
        return _to_points(lam, inten)

    half = int(window_size)//2
    n = lam.size

    # prefix sums give every truncated window in O(n)
    csum = _np.concatenate(([0.0], _np.cumsum(inten)))
    idx = _np.arange(n)
    start = _np.maximum(0, idx - half)
    end = _np.minimum(n - 1, idx + half)
    smoothed = (csum[end + 1] - csum[start])/(end - start + 1)

    return _to_points(lam, smoothed)

# --------------------------- resampling -------------------------------

def deduplicate(spectrum) -> _List[SpectrumPoint]:
    '''
    Sort by wavelength and drop repeated wavelengths, keeping the first
    occurrence of each.
    '''
    return _to_points(*_unique_sorted(spectrum))

def _grid(start, end, step):
    if step <= 0:
        raise ValueError("step must be > 0.")
    if end < start:
        return _np.empty(0)
    # small slack so that an end point reached by float steps is kept
    n = int(_math.floor((end - start)/step + 1e-9)) + 1
    return start + step*_np.arange(n)

def interpolate_spectrum(spectrum,
                         step: float = 1.0,
                         start: _Optional[float] = None,
                         end: _Optional[float] = None) -> _List[SpectrumPoint]:
    """
    Interpolate a spectrum onto a uniform wavelength grid.

    Parameters
    ----------
    spectrum : spectrum-like
        Input samples; may be non-uniform and unsorted.
    step : float, optional
        Grid spacing in nm (default 1).
    start, end : float, optional
        Grid limits in nm. Default to the extent of the data.

    Returns
    -------
    list of SpectrumPoint
        Linear interpolation between bracketing samples. Grid points at or
        beyond either end of the data take the nearest end intensity; there
        is no extrapolation.

    Raises
    ------
    ValueError
        If ``step <= 0``.
    """
    lam, inten = _unique_sorted(spectrum)
    if lam.size == 0:
        return []
    if _as_spectrum_array(spectrum).shape[0] == 1:
        return _to_points(lam, inten)

    start = lam[0] if start is None else float(start)
    end = lam[-1] if end is None else float(end)

    grid = _grid(start, end, step)
    return _to_points(grid, _np.interp(grid, lam, inten))

def interpolate_to_visible_range(spectrum) -> _List[SpectrumPoint]:
    return interpolate_spectrum(spectrum, 1.0, CIE_MIN_WAVELENGTH, CIE_MAX_WAVELENGTH)

def resample_spectrum(spectrum, num_points: int) -> _List[SpectrumPoint]:
    '''
    Resample onto ``num_points`` evenly spaced wavelengths spanning the
    data, i.e. ``interpolate_spectrum`` with step (max - min)/(num_points - 1).
    Fewer than two requested points return the sorted input.
    '''
    lam, inten = _sorted_spectrum(spectrum)
    if lam.size == 0 or num_points < 2 or lam[-1] == lam[0]:
        return _to_points(lam, inten)

    lam_u, inten_u = _unique_sorted(spectrum)
    grid = _np.linspace(lam_u[0], lam_u[-1], int(num_points))
    return _to_points(grid, _np.interp(grid, lam_u, inten_u))

def extend_to_visible_range(spectrum) -> _List[SpectrumPoint]:
    """
    Cover 380-780 nm: interpolate the data at 1 nm and pad zero-intensity
    points on both sides out to the visible limits. Data outside the
    visible range is dropped. An empty spectrum becomes 401 zeros.
    """
    lam, inten = _sorted_spectrum(spectrum)
    lo, hi = int(CIE_MIN_WAVELENGTH), int(CIE_MAX_WAVELENGTH)
    if lam.size == 0:
        return [SpectrumPoint(float(wl), 0.0) for wl in range(lo, hi + 1)]

    min_wl, max_wl = lam[0], lam[-1]
    interpolated = interpolate_spectrum(spectrum, 1.0)

    result = [SpectrumPoint(float(wl), 0.0) for wl in range(lo, hi + 1) if wl < min_wl]
    result += [p for p in interpolated if lo <= p.wavelength <= hi]
    result += [SpectrumPoint(float(wl), 0.0) for wl in range(lo, hi + 1) if wl > max_wl]
    return result

# ----------------------------- shifting -------------------------------

def shift_spectrum(spectrum, shift_nm: float) -> _List[SpectrumPoint]:
    '''
    S'(lambda) = S(lambda - shift_nm). Positive shifts move toward red.
    '''
    arr = _as_spectrum_array(spectrum)
    return _to_points(arr[:, 0] + shift_nm, arr[:, 1])

def shift_spectrum_clamped(spectrum,
                           shift_nm: float,
                           min_wavelength: float = CIE_MIN_WAVELENGTH,
                           max_wavelength: float = CIE_MAX_WAVELENGTH) -> _List[SpectrumPoint]:
    '''
    Like ``shift_spectrum`` but samples landing outside
    [min_wavelength, max_wavelength] get zero intensity. No sample is
    removed.
    '''
    arr = _as_spectrum_array(spectrum)
    lam = arr[:, 0] + shift_nm
    inside = (lam >= min_wavelength) & (lam <= max_wavelength)
    return _to_points(lam, _np.where(inside, arr[:, 1], 0.0))

# ---------------------------- inspection ------------------------------

def validate_spectrum(spectrum) -> ValidationReport:
    """
    Check a spectrum for problems that degrade the colorimetry.

    Returns
    -------
    ValidationReport
        ``valid`` is False only when there are errors (no data). Warnings
        flag: fewer than 3 points, a range beyond 300-900 nm, a range
        narrower than 10 nm, negative intensities and duplicated wavelengths.
    """
    arr = _as_spectrum_array(spectrum)
    errors, warnings = [], []

    if arr.shape[0] == 0:
        errors.append('No data points found')
        return ValidationReport(False, tuple(errors), tuple(warnings))

    lam, inten = arr[:, 0], arr[:, 1]

    if lam.size < 3:
        warnings.append('Very few data points - results may be inaccurate')

    if lam.min() < 300 or lam.max() > 900:
        warnings.append('Wavelength range extends beyond typical visible spectrum (380-780nm)')

    if lam.max() - lam.min() < 10:
        warnings.append('Wavelength range is very narrow')

    if _np.any(inten < 0):
        warnings.append('Negative intensity values detected - will be treated as zero')

    if _np.unique(lam).size != lam.size:
        warnings.append('Duplicate wavelength values detected - using first occurrence')

    for message in warnings:
        _logger.warning(message)

    return ValidationReport(not errors, tuple(errors), tuple(warnings))

def create_spectrum_data(spectrum) -> SpectrumSummary:
    '''
    Summary of a spectrum: its points, wavelength extent and the wavelength
    of maximum intensity (shortest wavelength on ties).
    '''
    arr = _as_spectrum_array(spectrum)
    points = tuple(_to_points(arr[:, 0], arr[:, 1]))
    if not points:
        return SpectrumSummary(points, 0.0, 0.0, 0.0)

    lam, inten = _unique_sorted(arr)
    peak = float(lam[int(_np.argmax(inten))])
    return SpectrumSummary(points, float(arr[:, 0].min()), float(arr[:, 0].max()), peak)
