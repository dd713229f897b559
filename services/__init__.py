"""
Asset Tracker Services
======================

Services:
- asset_tracker: asset registry, administration and warranty registration
"""

__all__ = [
    "asset_tracker",
]
