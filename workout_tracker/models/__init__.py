from .exercise import ExerciseDefinition
from .statistics import WorkoutStatistics
from .user import USERNAME_MAX_LENGTH, UserProfile
from .workout import PerformedExercise, WorkoutRecord, at_noon
