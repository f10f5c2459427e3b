from .api_gateway import *  # NOQA
from .api_provider import *  # NOQA
from .exceptions import *  # NOQA
from .request import *  # NOQA
from .result import *  # NOQA
