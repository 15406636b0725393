"""Allow ``python -m phenogo``."""

import sys

from .cli.main import main

sys.exit(main())
