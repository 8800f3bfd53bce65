"""Chat command handling with an allow-list for privileged commands."""

from __future__ import annotations

__version__ = "0.1.0"
