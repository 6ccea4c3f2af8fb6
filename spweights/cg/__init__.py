"""
A module for spherical geometry used by the distance-based graph builders.
"""

from .sphere import *  # noqa: F403
