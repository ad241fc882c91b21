"""Allow ``python -m labelscan <image_path>``."""

import sys

from labelscan.cli import main

sys.exit(main())
