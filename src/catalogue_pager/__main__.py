"""Allow `python -m catalogue_pager`."""

import sys

from catalogue_pager.cli import main

sys.exit(main())
