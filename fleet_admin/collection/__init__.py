# (c) Nelen & Schuurmans

from .collection import *  # NOQA
from .debouncer import *  # NOQA
from .flash import *  # NOQA
from .normalization import *  # NOQA
from .optimistic import *  # NOQA
from .query_controller import *  # NOQA
from .state import *  # NOQA
