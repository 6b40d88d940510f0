"""Allow ``python -m create_exbackend``."""

import sys

from create_exbackend.cli import main

sys.exit(main())
