import sys

from epoch.cli import main

sys.exit(main())
