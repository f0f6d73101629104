__title__ = 'spectrolocus'
__version__ = '0.1.0'
__description__ = 'Spectral colorimetry and spectral-locus geometry for chromaticity diagrams'
__url__ = 'https://github.com/spectrolocus/spectrolocus'
__author__ = 'spectrolocus developers'
__license__ = 'MIT'
__build__ = 0

from .datatypes import *
from .reference_data import *
from .settings import *
from .colorimetry import *
from .chromaticity import *
from .color_system import *
from .processing import *
from .analysis import *
from .locus import *
from .presets import *
from .diagram import *
