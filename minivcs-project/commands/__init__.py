# This file makes the 'commands' directory a Python package
# Importing command modules from here

from . import init
from . import add
from . import commit
from . import log
from . import status
from . import config
from . import branch
from . import checkout
from . import diff
from . import merge
from . import reset
