#!/usr/bin/env python3
import sys

from ping_latency_reporter.cli import main

if __name__ == "__main__":
    sys.exit(main())
