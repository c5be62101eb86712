# constraint_monitor/__main__.py
import sys

from constraint_monitor.cli.main import main

sys.exit(main())
