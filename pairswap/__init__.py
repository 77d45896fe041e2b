"""
pairswap: constant-product automated market maker with share-based pool accounting.
"""

__version__ = "0.1.0"
