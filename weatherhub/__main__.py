import sys

from weatherhub.cli import main

sys.exit(main())
