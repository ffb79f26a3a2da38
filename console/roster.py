"""
Roster Console — command-line front end
=======================================
Signs the operator in (or restores a remembered session) and prints the
dashboard summary for the configured roster API.

Usage:
    python roster.py [--api URL] [--remember] [--logout]
"""

import sys

from roster_core.runner import main

if __name__ == "__main__":
    sys.exit(main())
