# -*- coding: utf-8 -*-
"""
Peak and bandwidth (FWHM, FWQM) extraction for emission spectra.
"""

import numpy as _np
from typing import Optional as _Optional, Tuple as _Tuple

from .datatypes import AnalysisResult
from .utils import _unique_sorted

__all__ = ['analyze_spectrum',
           'find_width_at_level',
           'get_peak_wavelength',
           'get_fwhm']

def _peak_index(intensity) -> int:
    # strict '>' keeps the earliest sample on ties
    peak_idx, peak = 0, -_np.inf
    for i, value in enumerate(intensity):
        if value > peak:
            peak, peak_idx = value, i
    return peak_idx

def find_width_at_level(wavelength, intensity, peak_idx: int, level: float,
                        shift_nm: float = 0.0) -> _Optional[_Tuple[float, float]]:
    """
    Wavelengths where the spectrum crosses ``level`` on each side of the peak.

    Scans outward from ``peak_idx``: to the left for the first pair with
    I[i] >= level > I[i-1], to the right for the first pair with
    I[i] >= level > I[i+1], and linearly interpolates each crossing.

    Parameters
    ----------
    wavelength, intensity : ndarray
        Samples sorted ascending by wavelength.
    peak_idx : int
        Index of the peak sample.
    level : float
        Intensity level of the crossing.
    shift_nm : float, optional
        Added to both reported crossings.

    Returns
    -------
    (left, right) or None
        None if either side has no crossing.
    """
    lam = _np.asarray(wavelength, dtype=float)
    inten = _np.asarray(intensity, dtype=float)

    left = None
    for i in range(peak_idx, 0, -1):
        if inten[i] >= level and inten[i - 1] < level:
            t = (level - inten[i - 1])/(inten[i] - inten[i - 1])
            left = lam[i - 1] + t*(lam[i] - lam[i - 1]) + shift_nm
            break

    right = None
    for i in range(peak_idx, lam.size - 1):
        if inten[i] >= level and inten[i + 1] < level:
            t = (level - inten[i])/(inten[i + 1] - inten[i])
            right = lam[i] + t*(lam[i + 1] - lam[i]) + shift_nm
            break

    if left is None or right is None:
        return None
    return float(left), float(right)

def analyze_spectrum(spectrum, shift_nm: float = 0.0) -> AnalysisResult:
    """
    Peak position, peak intensity, FWHM and FWQM of a spectrum.

    Parameters
    ----------
    spectrum : spectrum-like
        Unshifted samples, any order. Repeated wavelengths keep their
        first occurrence only, as in ``locus.track_peak``.
    shift_nm : float, optional
        Wavelength shift applied to the reported positions only. The peak
        search and the widths are computed on the unshifted data, so widths
        do not depend on the shift.

    Returns
    -------
    AnalysisResult
        Width fields are None when the spectrum does not fall below the
        corresponding level on both sides of the peak. An empty spectrum
        gives zero peak values and no widths.
    """
    lam, inten = _unique_sorted(spectrum)
    if lam.size == 0:
        return AnalysisResult(peak_wavelength=0.0, peak_intensity=0.0)

    peak_idx = _peak_index(inten)
    peak = float(inten[peak_idx])

    fwhm_range = find_width_at_level(lam, inten, peak_idx, peak/2, shift_nm)
    fwqm_range = find_width_at_level(lam, inten, peak_idx, peak/4, shift_nm)

    return AnalysisResult(
        peak_wavelength=float(lam[peak_idx]) + shift_nm,
        peak_intensity=peak,
        fwhm=None if fwhm_range is None else fwhm_range[1] - fwhm_range[0],
        fwhm_range=fwhm_range,
        fwqm=None if fwqm_range is None else fwqm_range[1] - fwqm_range[0],
        fwqm_range=fwqm_range,
    )

def get_peak_wavelength(spectrum) -> float:
    '''
    Wavelength of maximum intensity, shortest wavelength on ties;
    0 for an empty spectrum.
    '''
    lam, inten = _unique_sorted(spectrum)
    if lam.size == 0:
        return 0.0
    return float(lam[_peak_index(inten)])

def get_fwhm(spectrum) -> float:
    '''
    FWHM between the first and last half-maximum crossings of the whole
    spectrum. Falls back to the data edges when a side never crosses, and
    returns 0 for fewer than 3 distinct wavelengths.
    '''
    lam, inten = _unique_sorted(spectrum)
    if lam.size < 3:
        return 0.0

    half = _np.max(inten)/2

    left = lam[0]
    for i in range(lam.size - 1):
        if inten[i] < half and inten[i + 1] >= half:
            t = (half - inten[i])/(inten[i + 1] - inten[i])
            left = lam[i] + t*(lam[i + 1] - lam[i])
            break

    right = lam[-1]
    for i in range(lam.size - 1, 0, -1):
        if inten[i] < half and inten[i - 1] >= half:
            t = (half - inten[i])/(inten[i - 1] - inten[i])
            right = lam[i] + t*(lam[i - 1] - lam[i])
            break

    return float(right - left)
