__title__ = 'switchyard'
__author__ = 'Switchyard Contributors'
__license__ = 'MIT'
# Placeholder, modified by dynamic-versioning.
__version__ = "0.1.0"

from .options import *
from .commands import *
from .faults import *
from .parsing import *
from .rendering import *
from .polling import *
from .cli import *

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

# Load the exposed API of the options
__all__ += options.__all__  # type: ignore[attr-defined]
# Load the exposed API of the commands
__all__ += commands.__all__  # type: ignore[attr-defined]
# Load the exposed API of the faults
__all__ += faults.__all__  # type: ignore[attr-defined]
# Load the exposed API of the parser
__all__ += parsing.__all__  # type: ignore[attr-defined]
# Load the exposed API of the renderer
__all__ += rendering.__all__  # type: ignore[attr-defined]
# Load the exposed API of the poll loop
__all__ += polling.__all__  # type: ignore[attr-defined]
# Load the exposed API of the invocation handler
__all__ += cli.__all__  # type: ignore[attr-defined]
