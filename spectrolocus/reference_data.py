# -*- coding: utf-8 -*-
"""
This library contains the fixed reference tables:
    CIE 1931 2-degree standard observer (380-780 nm, 5 nm)
    CIE 1931 spectral locus (81 anchors)
    Display gamut triangles (sRGB, DCI-P3, BT.2020, AdobeRGB)

The observer comes from colour-science; the locus anchors and gamuts are
read from ``spectra_data``. Every table is built once and handed out as a
read-only array; nothing in the package can modify them.
"""

import colour as _clr
import logging as _logging
import numpy as _np
import pandas as _pd
import yaml as _yaml
from pathlib import Path as _Path
from typing import Dict as _Dict, List as _List

from .datatypes import ObserverEntry, LocusAnchor, Gamut, CIE1931Coordinates, CIE1976Coordinates

__all__ = ['CIE_MIN_WAVELENGTH',
           'CIE_MAX_WAVELENGTH',
           'CIE_STEP',
           'OBSERVER_NAME',
           'D65_XY',
           'D65_UV',
           'GAMUT_NAMES',
           'read_table',
           'observer_table',
           'observer_entries',
           'spectral_locus_xy',
           'locus_anchors',
           'get_gamut',
           'available_gamuts']

_logger = _logging.getLogger(__name__)

_DATA_DIR = _Path(__file__).parent / 'spectra_data'

CIE_MIN_WAVELENGTH = 380.0      # nm
CIE_MAX_WAVELENGTH = 780.0      # nm
CIE_STEP = 5.0                  # nm

OBSERVER_NAME = 'CIE 1931 2 Degree Standard Observer'

D65_XY = CIE1931Coordinates(0.3127, 0.3290)
D65_UV = CIE1976Coordinates(0.1978, 0.4683)

GAMUT_NAMES = ('sRGB', 'DCI-P3', 'BT.2020', 'AdobeRGB')

# Global cache for loaded tables
_table_cache = {}

def read_table(filename, columns):
    """
    Read a whitespace separated table from the package data folder.

    Parameters
    ----------
    filename : str
        Name of the file (with extension) inside ``spectra_data``.
    columns : list of str
        Column labels, first one is the wavelength in nm.

    Returns
    -------
    data : ndarray, shape (N, len(columns))
        Read-only table sorted by wavelength.
    """
    key = (filename, tuple(columns))
    if key in _table_cache:
        return _table_cache[key]

    file_path = _DATA_DIR / filename
    if not file_path.exists():
        raise FileNotFoundError(f"Reference table not found: {file_path}")

    df = _pd.read_csv(file_path, comment='#', sep=r'\s+', header=None)
    if df.shape[1] != len(columns):
        raise ValueError(f"{filename}: expected {len(columns)} columns, found {df.shape[1]}.")
    df.columns = list(columns)
    df = df.sort_values(columns[0], kind='mergesort')

    data = df.to_numpy(dtype=float)
    data.flags.writeable = False

    _logger.debug("Loaded %s (%d rows)", filename, data.shape[0])
    _table_cache[key] = data
    return data

def observer_table():
    '''
    CIE 1931 2-degree color matching functions.

    Returns
    -------
    ndarray, shape (81, 4)
        Columns: wavelength (nm), xbar, ybar, zbar. Read-only.
    '''
    if 'observer' in _table_cache:
        return _table_cache['observer']

    cmfs = _clr.MSDS_CMFS[OBSERVER_NAME].copy()
    cmfs.trim(_clr.SpectralShape(CIE_MIN_WAVELENGTH, CIE_MAX_WAVELENGTH, 1))

    # every 5th sample of the 1 nm tabulation
    keep = _np.isin(cmfs.wavelengths, _np.arange(CIE_MIN_WAVELENGTH, CIE_MAX_WAVELENGTH + CIE_STEP, CIE_STEP))
    data = _np.column_stack((cmfs.wavelengths[keep], cmfs.values[keep]))
    data.flags.writeable = False

    _logger.debug("Built %s table (%d rows)", OBSERVER_NAME, data.shape[0])
    _table_cache['observer'] = data
    return data

def observer_entries() -> _List[ObserverEntry]:
    return [ObserverEntry(*map(float, row)) for row in observer_table()]

def spectral_locus_xy():
    '''
    Spectral locus anchors in CIE 1931 xy.

    Returns
    -------
    ndarray, shape (81, 3)
        Columns: wavelength (nm), x, y. Read-only.
    '''
    return read_table('spectral_locus_xy.txt', ['wavelength', 'x', 'y'])

def locus_anchors() -> _List[LocusAnchor]:
    return [LocusAnchor(*map(float, row)) for row in spectral_locus_xy()]

def _load_gamuts() -> _Dict[str, Gamut]:
    if 'gamuts' in _table_cache:
        return _table_cache['gamuts']

    with open(_DATA_DIR / 'gamuts.yaml', 'r', encoding='utf-8') as f:
        raw = _yaml.safe_load(f)

    gamuts = {}
    for key, entry in raw['gamuts'].items():
        vertices = tuple(CIE1931Coordinates(float(x), float(y)) for x, y in entry['vertices'])
        if len(vertices) != 3:
            raise ValueError(f"Gamut {key} must define exactly 3 vertices.")
        white = CIE1931Coordinates(*map(float, entry.get('white_point', raw['white_point'])))
        gamuts[key] = Gamut(name=str(entry['name']), vertices=vertices, white_point=white)

    _logger.debug("Loaded %d gamut definitions", len(gamuts))
    _table_cache['gamuts'] = gamuts
    return gamuts

def get_gamut(name: str) -> Gamut:
    """
    Return the gamut triangle registered under ``name``.

    Parameters
    ----------
    name : str
        One of 'sRGB', 'DCI-P3', 'BT.2020', 'AdobeRGB'.

    Raises
    ------
    ValueError
        If ``name`` is not a known gamut identifier.
    """
    gamuts = _load_gamuts()
    if name not in gamuts:
        raise ValueError(f"Unknown gamut {name!r}; valid names are {', '.join(gamuts)}.")
    return gamuts[name]

def available_gamuts() -> _List[str]:
    return list(_load_gamuts())
