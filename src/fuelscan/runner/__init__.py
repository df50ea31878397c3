"""
CLI runner module.

Provides commands:
- scan: Recognize a photo and list candidates
- review: Interactive review, applied to a new trip
- init-config: Write the default config file
"""

from .main import create_cli, main

__all__ = [
    "create_cli",
    "main",
]
