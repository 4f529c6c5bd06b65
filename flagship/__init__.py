__path__ = __import__("pkgutil").extend_path(__path__, __name__)  # NOQA: F-821
__title__ = 'flagship'
__author__ = 'Eiko Reishin (影皇嶺臣)'
__license__ = 'MIT'
__version__ = "0.0.0"
version_info = tuple(map(int, __version__.split(".")))

from . import faults, options, parser, registry
from .faults import *
from .options import *
from .parser import *
from .registry import *

__all__ = (
    "__title__",
    "__author__",
    "__license__",
    "__version__",
    "version_info",
    *faults.__all__,
    *options.__all__,
    *registry.__all__,
    *parser.__all__,
)
