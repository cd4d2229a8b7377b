"""Allow ``python -m chessframe``."""

import sys

from chessframe.app import main

sys.exit(main())
