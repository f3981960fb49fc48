#!/usr/bin/env python3
"""
LocationSpy — Rich CLI Entry Point.

Usage:
    python main.py                              # Show help
    python main.py search "Flatiron Building"   # Aggregate images
    python main.py search Boston -s loc --timeline
    python main.py sources                      # List sources
    python main.py config                       # Show configuration
"""

from cli.app import app

if __name__ == "__main__":
    app()
