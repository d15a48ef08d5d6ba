"""
Entry point for running the presence monitor as a module.

Usage:
    python -m presence_monitor [hours]
"""

from .cli import main

if __name__ == "__main__":
    main()
