"""Allow ``python -m findermeister_export``."""

import sys

from findermeister_export.main import main

sys.exit(main())
