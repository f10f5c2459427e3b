# (c) Nelen & Schuurmans

from .base.domain import *  # NOQA
from .api_client import *  # NOQA
from .collection import *  # NOQA
from .config import ConsoleConfig  # NOQA

# fmt: off
__version__ = '0.1.0.dev0'
# fmt: on
