"""`python -m content_linter` runs the combined validation."""

import sys

from content_linter.cli import validate_main

sys.exit(validate_main())
