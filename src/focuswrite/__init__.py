"""FocusWrite: one line at a time writing sessions."""

__version__ = "0.1.0"
