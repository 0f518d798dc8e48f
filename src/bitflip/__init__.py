"""Low-intrusion RAM bit flip detector."""

from __future__ import annotations

__version__ = "0.1.0"
