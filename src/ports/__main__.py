import sys

from ports.cli import main

sys.exit(main())
