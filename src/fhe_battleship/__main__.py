"""Allow ``python -m fhe_battleship``."""

import sys

from .cli import main

sys.exit(main())
