"""
Statistics derived from a user's workout history.
"""

from numbers import Number
from typing import Dict, Iterable

from workout_tracker.models.statistics import WorkoutStatistics
from workout_tracker.models.workout import WorkoutRecord

UNKNOWN_EXERCISE = "Unknown Exercise"
NO_EXERCISE = "N/A"


def _is_number(value) -> bool:
    return isinstance(value, Number) and not isinstance(value, bool)


def compute_statistics(workouts: Iterable[WorkoutRecord]) -> WorkoutStatistics:
    """Reduce a list of workouts into summary statistics.

    Pure and order-independent except for ``most_frequent_exercise``: on
    equal counts the exercise encountered first in the input wins.

    Volume is ``weight * sets`` summed over every performed exercise where
    both are numbers. Reps are deliberately left out of the volume figure.
    """
    total_workouts = 0
    total_exercises = 0
    total_volume = 0.0
    exercise_counts: Dict[str, int] = {}

    for workout in workouts:
        total_workouts += 1
        performed = workout.exercises_performed or []
        total_exercises += len(performed)

        for exercise in performed:
            if _is_number(exercise.weight) and _is_number(exercise.sets):
                total_volume += exercise.weight * exercise.sets

            name = exercise.exercise_name or UNKNOWN_EXERCISE
            exercise_counts[name] = exercise_counts.get(name, 0) + 1

    # dicts keep insertion order, so ties go to the first name seen
    most_frequent = NO_EXERCISE
    max_count = 0
    for name, count in exercise_counts.items():
        if count > max_count:
            max_count = count
            most_frequent = name

    average = total_exercises / total_workouts if total_workouts else 0.0

    return WorkoutStatistics(
        total_workouts=total_workouts,
        total_exercises_logged=total_exercises,
        total_volume_lifted=total_volume,
        most_frequent_exercise=most_frequent,
        average_exercises_per_workout=average,
    )
