# -*- coding: utf-8 -*-
"""
Visual tuning parameters of the spectrum-on-locus ridge.

The ridge heights and the interior reference point used to orient the locus
normals are empirical display constants, so they are kept in a settings
object that can be read from YAML instead of being hard-coded.
"""

import logging as _logging
import yaml as _yaml
from dataclasses import dataclass, fields, replace
from pathlib import Path as _Path
from typing import Tuple as _Tuple, Union as _Union

from .datatypes import DiagramMode
from .utils import _coerce_mode

__all__ = ['LocusSettings', 'DEFAULT_SETTINGS', 'load_settings']

_logger = _logging.getLogger(__name__)


@dataclass(frozen=True)
class LocusSettings:
    """
    Parameters
    ----------
    ridge_scale_xy : float
        Ridge height (in xy units) of a unit-intensity sample, CIE 1931 mode.
    ridge_scale_uv : float
        Ridge height (in u'v' units) of a unit-intensity sample, CIE 1976 mode.
    interior_reference : (float, float)
        Approximate interior point of the horseshoe; normals pointing toward
        it are flipped.
    ridge_min_wavelength, ridge_max_wavelength : float
        Wavelength band (nm) of the locus used for the ridge.
    locus_step : float
        Spacing (nm) of the high-resolution locus.
    flat_peak_threshold : float
        Smallest |second difference| accepted by the parabolic peak fit.
    """
    ridge_scale_xy: float = 0.08
    ridge_scale_uv: float = 0.06
    interior_reference: _Tuple[float, float] = (0.33, 0.33)
    ridge_min_wavelength: float = 380.0
    ridge_max_wavelength: float = 700.0
    locus_step: float = 1.0
    flat_peak_threshold: float = 1e-10

    def __post_init__(self):
        if self.locus_step <= 0:
            raise ValueError("locus_step must be > 0.")
        if self.ridge_max_wavelength < self.ridge_min_wavelength:
            raise ValueError("ridge_max_wavelength must be >= ridge_min_wavelength.")
        if len(self.interior_reference) != 2:
            raise ValueError("interior_reference must be an (x, y) pair.")
        object.__setattr__(self, 'interior_reference',
                           (float(self.interior_reference[0]), float(self.interior_reference[1])))

    def ridge_scale(self, mode: _Union[str, DiagramMode]) -> float:
        if _coerce_mode(mode) is DiagramMode.CIE1976:
            return self.ridge_scale_uv
        return self.ridge_scale_xy

    def updated(self, **changes) -> 'LocusSettings':
        return replace(self, **changes)


DEFAULT_SETTINGS = LocusSettings()

def load_settings(path=None) -> LocusSettings:
    '''
    Read a ``LocusSettings`` from a YAML mapping.

    Parameters
    ----------
    path : str or Path, optional
        YAML file. Missing keys keep their defaults. If None, the settings
        shipped with the package are read.

    Returns
    -------
    LocusSettings
    '''
    if path is None:
        path = _Path(__file__).parent / 'spectra_data' / 'locus_settings.yaml'
    path = _Path(path)

    with open(path, 'r', encoding='utf-8') as f:
        raw = _yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        raise ValueError(f"{path}: settings file must contain a mapping.")

    known = {f.name for f in fields(LocusSettings)}
    unknown = set(raw) - known
    if unknown:
        raise ValueError(f"{path}: unknown settings {', '.join(sorted(unknown))}.")

    if 'interior_reference' in raw:
        raw['interior_reference'] = tuple(raw['interior_reference'])

    settings = LocusSettings(**raw)
    _logger.debug("Loaded locus settings from %s", path)
    return settings
