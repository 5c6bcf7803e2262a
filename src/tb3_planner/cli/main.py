"""
CLI entry point using Typer.

Provides commands for the training planner:
- templates: List or show templates
- one-rm: 1RM and percentage table calculator
- log-max / lifts: Record max tests, show current lifts
- plates: Plate loading for a barbell or dip belt
- start / schedule / next / complete: Run a template
- validate / export / import: Data file maintenance
"""

from .app import app
from .commands import data, lifts, plates, program, templates  # noqa: F401  (registers commands)

__all__ = ["app"]


if __name__ == "__main__":
    app()
