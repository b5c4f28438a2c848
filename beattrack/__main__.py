import sys

from beattrack.cli import main

sys.exit(main())
