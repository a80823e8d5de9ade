"""
Workout Tracker: exercise catalog, workout logging, history and statistics.
"""
