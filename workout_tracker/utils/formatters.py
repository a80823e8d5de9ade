from datetime import datetime
from typing import Optional

from workout_tracker.models.statistics import WorkoutStatistics
from workout_tracker.models.workout import PerformedExercise, WorkoutRecord


def format_workout_date(value: Optional[datetime]) -> str:
    """Format a workout date like "June 1, 2024"."""
    if not value:
        return "No Date"
    return f"{value.strftime('%B')} {value.day}, {value.year}"


def format_number(value: Optional[float]) -> str:
    """Drop the fractional part of whole numbers: 3.0 -> "3", 2.5 -> "2.5"."""
    if value is None:
        return ""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"


def format_exercise_line(exercise: PerformedExercise) -> str:
    line = (
        f"- **{exercise.exercise_name}**: Sets: {format_number(exercise.sets)}"
        f" | Reps: {format_number(exercise.reps)}"
    )
    if exercise.weight is not None:
        line += f" | Weight: {format_number(exercise.weight)}"
    if exercise.notes:
        line += f"\n  *Notes: {exercise.notes}*"
    return line


def format_workout_markdown(workout: WorkoutRecord) -> str:
    """Format a workout and its exercises as markdown.

    Args:
        workout: The workout to format

    Returns:
        Formatted markdown string
    """
    markdown = f"### Workout on {format_workout_date(workout.date)}\n\n"
    if not workout.exercises_performed:
        return markdown + "No exercises recorded for this workout.\n"

    markdown += "\n".join(
        format_exercise_line(exercise) for exercise in workout.exercises_performed
    )
    return markdown + "\n"


def format_statistics_markdown(stats: WorkoutStatistics) -> str:
    return (
        "## Personal Statistics\n\n"
        f"- Total Workouts: {stats.total_workouts}\n"
        f"- Total Exercises Logged: {stats.total_exercises_logged}\n"
        f"- Total Volume Lifted: {format_number(stats.total_volume_lifted)}\n"
        f"- Most Frequent Exercise: {stats.most_frequent_exercise}\n"
        f"- Avg. Exercises / Workout: {stats.average_exercises_per_workout:.1f}\n"
    )
