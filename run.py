#!/usr/bin/env python3
"""Entry point for running the section dump without installing."""

import sys

from reminder_sections.app import main

if __name__ == "__main__":
    sys.exit(main())
