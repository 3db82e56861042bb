__title__ = 'replkit'
__author__ = 'replkit contributors'
__license__ = 'MIT'
# Placeholder, modified by dynamic-versioning.
__version__ = "0.1.0"

from .binding import *
from .commands import *
from .faults import *
from .help import *
from .parameters import *
from .readers import *
from .repl import *
from .tokens import *
from .values import *

VersionInfo = __import__("collections").namedtuple("VersionInfo", (
    "major",
    "minor",
    "micro",
    "releaselevel",
    "serial",
    "metadata"
))

# Placeholder, modified by dynamic-versioning.
version_info = VersionInfo(0, 1, 0, "final", 0, "")

__all__ = (
    "__title__",
    "__author__",
    "__license__",
    "__version__",
    "version_info"
)

# Load the exposed API of every submodule
__all__ += binding.__all__  # type: ignore[attr-defined]
__all__ += commands.__all__  # type: ignore[attr-defined]
__all__ += faults.__all__  # type: ignore[attr-defined]
__all__ += help.__all__  # type: ignore[attr-defined]
__all__ += parameters.__all__  # type: ignore[attr-defined]
__all__ += readers.__all__  # type: ignore[attr-defined]
__all__ += repl.__all__  # type: ignore[attr-defined]
__all__ += tokens.__all__  # type: ignore[attr-defined]
__all__ += values.__all__  # type: ignore[attr-defined]
