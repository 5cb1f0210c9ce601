import sys

from devcert.cli import main

sys.exit(main())
