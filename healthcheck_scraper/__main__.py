import sys

from healthcheck_scraper.interface.cli import main

sys.exit(main())
