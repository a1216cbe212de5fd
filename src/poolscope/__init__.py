"""
poolscope: AMM pool inspection, position resolution and multi-pool quoting.
"""

__version__ = "0.1.0"
