"""Allow ``python -m deja``."""

import sys

from deja.ui.cli import main

if __name__ == "__main__":
    sys.exit(main())
