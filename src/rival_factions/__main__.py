# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""Entry point for: python -m rival_factions"""

from .sim import run

if __name__ == "__main__":
    run()
