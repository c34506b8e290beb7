# =============================================================================
# Perch Entry Point for `python -m perch`
# =============================================================================
# This module allows Perch to be run as a Python module:
#
#   python -m perch
#
# This is equivalent to running the 'perch' command after installation.
# =============================================================================

import sys

from perch.app import main

if __name__ == "__main__":
    sys.exit(main())
