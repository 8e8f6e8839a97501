"""
Entry point for running the vehicle counter as a module.

Usage:
    python -m vehicle_counter [source]
"""

from .cli import main

if __name__ == "__main__":
    main()
