import logging as _logging
import numpy as _np
import pandas as _pd
from typing import Union as _Union, Tuple as _Tuple, List as _List

from .datatypes import SpectrumPoint, DiagramMode

_logger = _logging.getLogger(__name__)

# tolerance for "zero" denominators in coordinate conversions
_EPS = 1e-12

def _ndarray_check(x):
    '''
    check if x is not ndarray. If so, convert x to a 1d ndarray
    '''

    if not isinstance(x, _np.ndarray):
        return _np.array([x], dtype=float), True
    return x.astype(float), False

def _as_spectrum_array(spectrum) -> _np.ndarray:
    """
    Convert any spectrum-like input into a float array of shape (N, 2).

    Parameters
    ----------
    spectrum : sequence of SpectrumPoint / (wavelength, intensity) pairs,
               ndarray of shape (N, 2) or pandas.DataFrame
        When a DataFrame is given, the ``wavelength`` and ``intensity``
        columns are used if present, otherwise its first two columns.

    Returns
    -------
    ndarray, shape (N, 2)
        Column 0 is wavelength (nm), column 1 intensity. Order is preserved.
    """
    if spectrum is None:
        return _np.empty((0, 2))

    if isinstance(spectrum, _pd.DataFrame):
        if {'wavelength', 'intensity'}.issubset(spectrum.columns):
            spectrum = spectrum[['wavelength', 'intensity']]
        elif spectrum.shape[1] >= 2:
            spectrum = spectrum.iloc[:, :2]
        else:
            raise ValueError("DataFrame spectrum needs at least two columns.")
        arr = spectrum.to_numpy(dtype=float)
    else:
        arr = _np.asarray(list(spectrum) if not isinstance(spectrum, _np.ndarray) else spectrum,
                          dtype=float)

    if arr.size == 0:
        return _np.empty((0, 2))
    if arr.ndim != 2 or arr.shape[1] != 2:
        raise ValueError("spectrum must be a sequence of (wavelength, intensity) pairs.")
    return arr

def _sorted_spectrum(spectrum) -> _Tuple[_np.ndarray, _np.ndarray]:
    '''
    Return (wavelength, intensity) arrays sorted ascending by wavelength.
    The sort is stable, so duplicated wavelengths keep their input order.
    '''
    arr = _as_spectrum_array(spectrum)
    order = _np.argsort(arr[:, 0], kind='mergesort')
    return arr[order, 0], arr[order, 1]

def _to_points(wavelength, intensity) -> _List[SpectrumPoint]:
    return [SpectrumPoint(float(w), float(i)) for w, i in zip(wavelength, intensity)]

def _coerce_mode(mode: _Union[str, DiagramMode]) -> DiagramMode:
    try:
        return DiagramMode(mode)
    except ValueError:
        raise ValueError(f"Unknown diagram mode {mode!r}; use 'CIE1931' or 'CIE1976'.") from None

def _unique_sorted(spectrum) -> _Tuple[_np.ndarray, _np.ndarray]:
    '''
    Sorted (wavelength, intensity) with repeated wavelengths dropped; the
    first occurrence of each wavelength is kept.
    '''
    lam, inten = _sorted_spectrum(spectrum)
    lam, first = _np.unique(lam, return_index=True)
    return lam, inten[first]

def _warn_extrapolation(lam_arr, lo, hi, label="", quantity=""):
    lam_arr = _np.atleast_1d(lam_arr)
    if lam_arr.size == 0:
        return
    lam_min = float(_np.min(lam_arr))
    lam_max = float(_np.max(lam_arr))
    if lam_min < lo and lam_max > hi:
        _logger.debug(
            "Outside %s %s range (requested %.1f-%.1f nm; data %.1f-%.1f nm)",
            label, quantity, lam_min, lam_max, lo, hi,
            )

    else:
        if lam_min < lo:
            _logger.debug(
                "Below tabulated %s %s range (requested min %.1f nm; data starts %.1f nm)",
                label, quantity, lam_min, lo,
               )
        if lam_max > hi:
            _logger.debug(
                "Above tabulated %s %s range (requested max %.1f nm; data ends %.1f nm)",
                label, quantity, lam_max, hi,
            )
