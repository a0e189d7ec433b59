"""
bifrost - call into a Python library living in another process.
"""

__version__ = "0.1.0"
__logo__ = "🌈"
