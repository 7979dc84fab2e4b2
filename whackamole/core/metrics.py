"""Session metrics handed to the external score reporter after game over."""

from dataclasses import dataclass
from datetime import datetime

from .difficulty import DifficultyLevel


DIFFICULTY_MARKERS = {
    DifficultyLevel.EASY: "🟢",
    DifficultyLevel.MEDIUM: "🟡",
    DifficultyLevel.HARD: "🔴",
}


@dataclass(frozen=True)
class GameMetrics:
    """Summary of one finished session."""
    final_score: int
    difficulty: DifficultyLevel
    played_at: datetime
    time_survived_sec: int

    def to_dict(self) -> dict:
        return {
            'finalScore': self.final_score,
            'difficulty': self.difficulty.value,
            'playedAt': self.played_at.isoformat(),
            'timeSurvived': self.time_survived_sec,
        }


def format_metrics_summary(metrics: GameMetrics) -> str:
    """Render the markdown summary a reporter posts for a finished session."""
    marker = DIFFICULTY_MARKERS.get(metrics.difficulty, "")
    lines = [
        f"{marker} **Game Score Recorded**",
        "",
        f"- **Score**: {metrics.final_score} points",
        f"- **Difficulty**: {metrics.difficulty.value}",
        f"- **Time Survived**: {metrics.time_survived_sec}s",
        f"- **Recorded At**: {metrics.played_at.isoformat()}",
    ]
    return "\n".join(lines) + "\n"
