# (c) Nelen & Schuurmans

from .bans import *  # NOQA
from .contests import *  # NOQA
from .people import *  # NOQA
from .reports import *  # NOQA
from .servers import *  # NOQA
