"""King's Escape: a turn-based pursuit game on an N x N grid.

The King must reach the exit while enemies close in each turn. Allies
cannot move, but an enemy stepping into one sacrifices it and is blocked.
"""

__version__ = "0.1.0"
