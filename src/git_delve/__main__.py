import sys

from git_delve.cli import main

sys.exit(main())
