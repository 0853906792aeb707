"""Post-workout messages chosen from the mood reported before training."""

from __future__ import annotations

import random

from core import MOOD_INTENSITIES

# Opening line per intensity band
_CONGRATULATIONS = {
    "low": "You showed up on a hard day and finished {workout}. That counts double.",
    "mid": "{workout} is done. Steady work like this is what builds results.",
    "high": "What a session! You brought real energy to {workout}.",
}

# Recovery tip per mood
_TIPS = {
    "energized": [
        "Use that momentum tomorrow, but keep a rest day in the week.",
        "Refuel with protein in the next hour to make the most of it.",
    ],
    "good": [
        "Stretch for five minutes while you are still warm.",
        "Hydrate well tonight and your next session will feel easier.",
    ],
    "neutral": [
        "A short walk later today helps your muscles recover.",
        "Try to get to bed a little earlier tonight.",
    ],
    "tired": [
        "Prioritise sleep tonight; recovery is part of the plan.",
        "Go easy tomorrow. Light mobility work is enough.",
    ],
    "unmotivated": [
        "Be proud of starting. Next time, aim just to show up again.",
        "Write down one thing that went well today and keep it for next time.",
    ],
}


def intensity_band(intensity: int) -> str:
    if intensity <= 2:
        return "low"
    if intensity >= 4:
        return "high"
    return "mid"


class MotivationService:
    """Offline replacement for a generated post-workout message.

    ``rng`` can be given a seeded :class:`random.Random` for stable output.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        self.rng = rng or random.Random()

    def get_post_workout_message(
        self,
        mood: str,
        mood_intensity: int,
        workout_name: str,
        exercise_count: int,
    ) -> str:
        if mood not in MOOD_INTENSITIES:
            raise ValueError(f"Unknown mood '{mood}'")
        opening = _CONGRATULATIONS[intensity_band(int(mood_intensity))].format(
            workout=workout_name or "your workout"
        )
        noun = "exercise" if exercise_count == 1 else "exercises"
        return "\n".join(
            [
                opening,
                f"{exercise_count} {noun} in the book.",
                self.rng.choice(_TIPS[mood]),
            ]
        )
