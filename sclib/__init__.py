"""Small utilities: byte sizes, RC4 random, option matching, ring queue and signal handling."""

__version__ = "2.0.0"
__all__ = ["sc", "option", "ringqueue", "signals"]