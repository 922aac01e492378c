"""Run the API service: ``python -m inboxai_api``."""

import sys

from inboxai_api.server import main

if __name__ == "__main__":
    sys.exit(main())
