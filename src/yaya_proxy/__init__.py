"""
YaYa Wallet transactions proxy.
"""

__version__ = "1.0.0"
