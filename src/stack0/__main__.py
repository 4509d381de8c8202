"""Allow ``python -m stack0``."""

import sys

from stack0.cli import main

if __name__ == "__main__":
    sys.exit(main())
