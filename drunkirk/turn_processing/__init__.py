"""Turn processing: the round/turn rotation and challenge resolution.

Both NextTurn and SkipTurn flow through the same resolution helper so the
history records look the same apart from the skip marker and the points.
"""
