#!/usr/bin/env python3
"""
Serve the feed aggregation web view.

Usage:
    python scripts/serve.py 127.0.0.1:3000 -v
"""

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from feed_aggregation.web.app import main


if __name__ == "__main__":
    main()
