"""
Shared helpers for GoalCast (logging, filesystem paths).
"""
