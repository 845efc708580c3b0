#!/usr/bin/env python3
"""
Convenience shim to run romfilter from a source checkout.
Usage: python romfilter.py [--list-dirs [SUBDIR]] [SYSTEM] [--download] [--help]
"""

from romfilter.cli import main


if __name__ == "__main__":
    main()
