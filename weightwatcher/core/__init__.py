"""Core primitives: the moving-average engine and the reports built on it.

The engine averages over however many points are available, up to the window
size, so the first few report lines are already smoothed instead of blank.
"""
