"""Enum definitions for leaderboard badges."""

from enum import Enum


class Badge(str, Enum):
    """Badge awarded by leaderboard position."""

    ENERGY_CHAMPION = "Energy Champion"  # 1st
    ENERGY_MASTER = "Energy Master"  # 2nd
    ENERGY_EXPERT = "Energy Expert"  # 3rd
    ENERGY_SAVER = "Energy Saver"  # 4th to 10th
    NEW = "New"
