from pydantic import BaseModel, Field


class WorkoutStatistics(BaseModel):
    """Summary metrics derived from a user's workout history."""

    total_workouts: int = Field(default=0, alias="totalWorkouts")
    total_exercises_logged: int = Field(default=0, alias="totalExercisesLogged")
    # weight * sets; reps are not part of the volume figure
    total_volume_lifted: float = Field(default=0.0, alias="totalVolumeLifted")
    most_frequent_exercise: str = Field(default="N/A", alias="mostFrequentExercise")
    average_exercises_per_workout: float = Field(
        default=0.0, alias="averageExercisesPerWorkout"
    )

    class Config:
        populate_by_name = True
