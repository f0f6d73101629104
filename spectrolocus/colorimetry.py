# -*- coding: utf-8 -*-
"""
Spectrum -> CIE XYZ integration with the CIE 1931 2-degree observer.

X = k * Integral[S(lambda) * xbar(lambda) d lambda]
Y = k * Integral[S(lambda) * ybar(lambda) d lambda]
Z = k * Integral[S(lambda) * zbar(lambda) d lambda]
"""

import numpy as _np
from scipy.integrate import trapezoid as _trapezoid

from .datatypes import XYZColor
from .reference_data import observer_table, CIE_MIN_WAVELENGTH, CIE_MAX_WAVELENGTH
from .utils import _ndarray_check, _sorted_spectrum, _warn_extrapolation

__all__ = ['interpolate_observer',
           'spectrum_to_xyz',
           'monochromatic_to_xyz']

def interpolate_observer(wavelength):
    '''
    Color matching functions at arbitrary wavelengths.

    Linear interpolation over the 5 nm observer table. Wavelengths outside
    380-780 nm get zero.

    Parameters
    ----------
    wavelength : float or ndarray
        wavelength in nm.

    Returns
    -------
    xbar, ybar, zbar : float or ndarray
        Same shape as ``wavelength``.
    '''
    lam, lam_isfloat = _ndarray_check(wavelength)

    table = observer_table()
    inside = (lam >= CIE_MIN_WAVELENGTH) & (lam <= CIE_MAX_WAVELENGTH)

    out = []
    for col in (1, 2, 3):
        cmf = _np.interp(lam, table[:, 0], table[:, col])
        cmf = _np.where(inside, cmf, 0.0)
        out.append(float(cmf[0]) if lam_isfloat else cmf)

    return tuple(out)

def spectrum_to_xyz(spectrum, normalize: bool = True) -> XYZColor:
    """
    Convert an emission spectrum into CIE XYZ tristimulus values.

    Parameters
    ----------
    spectrum : spectrum-like
        (wavelength [nm], intensity) samples, any order. Samples are sorted
        ascending before integration.
    normalize : bool, optional
        If True (default) and Y > 0, scale so that Y = 100.

    Returns
    -------
    XYZColor

    Notes
    -----
    The trapezoidal rule runs over the sample spacing of the input itself,
    with the observer functions interpolated at every sample wavelength:

        X += 0.5*(I1*xbar(l1) + I2*xbar(l2))*(l2 - l1)

    Accuracy therefore depends on how densely the spectrum is sampled; use
    ``interpolate_spectrum`` beforehand for coarse data. Samples outside
    380-780 nm contribute nothing.
    """
    lam, inten = _sorted_spectrum(spectrum)
    if lam.size < 2:
        return XYZColor(0.0, 0.0, 0.0)

    _warn_extrapolation(lam, CIE_MIN_WAVELENGTH, CIE_MAX_WAVELENGTH,
                        label="CIE 1931", quantity="observer")

    xbar, ybar, zbar = interpolate_observer(lam)
    X = float(_trapezoid(inten*xbar, lam))
    Y = float(_trapezoid(inten*ybar, lam))
    Z = float(_trapezoid(inten*zbar, lam))

    if normalize and Y > 0:
        k = 100.0/Y
        return XYZColor(X*k, 100.0, Z*k)

    return XYZColor(X, Y, Z)

def monochromatic_to_xyz(wavelength: float) -> XYZColor:
    '''
    XYZ of monochromatic light, scaled so that Y = 100.

    The scale factor is 100/ybar (not the channel sum). Returns zeros when
    all three color matching functions vanish at ``wavelength``.
    '''
    xbar, ybar, zbar = interpolate_observer(float(wavelength))

    if xbar + ybar + zbar == 0:
        return XYZColor(0.0, 0.0, 0.0)
    if ybar == 0:
        # xbar or zbar alone; no finite Y=100 scaling exists
        return XYZColor(xbar, ybar, zbar)

    k = 100.0/ybar
    return XYZColor(xbar*k, 100.0, zbar*k)
