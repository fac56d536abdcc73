"""storecart - cart, session and order state for an embeddable checkout widget."""
from __future__ import annotations

__version__ = "1.0.0"
