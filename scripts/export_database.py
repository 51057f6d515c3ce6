#!/usr/bin/env python3
"""
Export Database Script

Backs up every table in the public schema to exports/.

Usage:
    Requires DATABASE_URL (environment or .env):
    $ python scripts/export_database.py
"""

import os
import sys

# Required for direct script execution without package installation
sys.path.append(os.path.join(os.path.dirname(__file__), "../src"))

from findermeister_export.main import main  # noqa: E402

if __name__ == "__main__":
    sys.exit(main())
