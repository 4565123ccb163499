from __future__ import annotations

import sys

from .Console import main

if __name__ == "__main__":
    sys.exit(main())
