"""Entry point for 'python -m anacan' command.

This module allows the Anacan CLI to be invoked using 'python -m anacan'.
"""

from anacan.cli import main

if __name__ == "__main__":
    main()
