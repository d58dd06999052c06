import sys

from tonpack.build.cli import main

sys.exit(main())
