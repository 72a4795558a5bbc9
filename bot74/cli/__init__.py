"""bot74's command line tools."""
# Licensed under the Eiffel Forum License 2.
from __future__ import annotations

from . import run, utils


__all__ = ['run', 'utils']
