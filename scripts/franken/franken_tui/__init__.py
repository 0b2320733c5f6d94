"""Terminal dashboard for Laravel applications."""

from __future__ import annotations

import logging

__version__ = "0.3.0"

# Log records must never reach the screen the dashboard draws on.
logging.getLogger(__name__).addHandler(logging.NullHandler())
