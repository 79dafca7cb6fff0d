"""Point cloud clustering: hierarchical linkage, k-d tree search, MST gap splitting and triplet cluster helpers."""

__version__ = "0.1.0"