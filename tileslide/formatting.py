"""
Display helpers shared by the CLI and the API.
"""

RATINGS = [
    (20000, "Master"),
    (10000, "Expert"),
    (5000, "Advanced"),
    (2000, "Intermediate"),
    (1000, "Novice"),
]


def format_score(score: int) -> str:
    """Score with thousands separators, e.g. 12,345."""
    return f"{score:,}"


def calculate_rating(score: int) -> str:
    for threshold, label in RATINGS:
        if score >= threshold:
            return label
    return "Beginner"


def format_time(seconds: float) -> str:
    """Duration as mm:ss."""
    minutes, remaining = divmod(int(seconds), 60)
    return f"{minutes:02d}:{remaining:02d}"
