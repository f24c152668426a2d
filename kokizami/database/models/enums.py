"""
Enumeration Types
------------------

Enums:
    - KizamiState: Whether a kizami is still running or already stopped
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from enum import Enum


class KizamiState(str, Enum):
    """
    Lifecycle state of a kizami.
    - RUNNING: No stop time recorded yet
    - STOPPED: Stopped at a recorded instant
    """

    RUNNING = "running"
    STOPPED = "stopped"

