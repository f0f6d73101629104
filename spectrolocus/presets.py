# -*- coding: utf-8 -*-
"""
This library contains synthetic reference spectra:
    Gaussian emitters (blue, green and red OLED-like presets)
    Phosphor-converted white LED
    Quasi-monochromatic line
"""

import numpy as _np
from typing import List as _List

from .datatypes import SpectrumPoint
from .processing import _grid
from .utils import _to_points

__all__ = ['generate_gaussian_spectrum',
           'generate_white_spectrum',
           'generate_monochromatic',
           'PRESETS',
           'get_preset']

def generate_gaussian_spectrum(peak_wavelength: float,
                               fwhm: float,
                               start: float = 380.0,
                               end: float = 780.0,
                               step: float = 1.0) -> _List[SpectrumPoint]:
    '''
    Gaussian emission band with unit peak height.

    Parameters
    ----------
    peak_wavelength : float
        Center wavelength in nm.
    fwhm : float
        Full width at half maximum in nm (> 0).
    start, end, step : float, optional
        Wavelength grid in nm (default 380-780 nm every 1 nm).

    Returns
    -------
    list of SpectrumPoint
    '''
    if fwhm <= 0:
        raise ValueError("fwhm must be > 0.")
    if step <= 0:
        raise ValueError("step must be > 0.")

    sigma = fwhm/(2*_np.sqrt(2*_np.log(2)))
    lam = _grid(start, end, step)
    inten = _np.exp(-(lam - peak_wavelength)**2/(2*sigma**2))
    return _to_points(lam, inten)

def generate_white_spectrum() -> _List[SpectrumPoint]:
    '''
    White LED approximation: 40% blue pump (450 nm, 25 nm FWHM) plus 60%
    broad yellow phosphor (570 nm, 80 nm FWHM).
    '''
    blue = _np.asarray(generate_gaussian_spectrum(450, 25))
    yellow = _np.asarray(generate_gaussian_spectrum(570, 80))
    return _to_points(blue[:, 0], 0.4*blue[:, 1] + 0.6*yellow[:, 1])

def generate_monochromatic(wavelength: float) -> _List[SpectrumPoint]:
    '''
    Narrow line on a 1 nm grid 380-780 nm: 1 at ``wavelength``, 0.5 within
    1 nm of it, 0 elsewhere.
    '''
    lam = _grid(380.0, 780.0, 1.0)
    dist = _np.abs(lam - wavelength)
    inten = _np.where(lam == wavelength, 1.0, _np.where(dist <= 1, 0.5, 0.0))
    return _to_points(lam, inten)

PRESETS = {
    'blue':  {'name': 'Blue (470nm)',  'peak': 470, 'fwhm': 40},
    'green': {'name': 'Green (530nm)', 'peak': 530, 'fwhm': 50},
    'red':   {'name': 'Red (620nm)',   'peak': 620, 'fwhm': 50},
    'white': {'name': 'White LED'},
}

def get_preset(key: str) -> _List[SpectrumPoint]:
    '''
    Fresh copy of a preset spectrum ('blue', 'green', 'red' or 'white').
    '''
    if key not in PRESETS:
        raise ValueError(f"Unknown preset {key!r}; valid keys are {', '.join(PRESETS)}.")
    if key == 'white':
        return generate_white_spectrum()
    entry = PRESETS[key]
    return generate_gaussian_spectrum(entry['peak'], entry['fwhm'])
