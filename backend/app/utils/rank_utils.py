"""Organizational rank precedence used to order roster and user listings."""

from typing import Iterable, List, Optional, Sequence, Tuple, TypeVar

T = TypeVar("T")

# Highest precedence first; the first tier with a matching keyword wins.
RANK_TIERS: Sequence[Tuple[int, Tuple[str, ...]]] = (
    (100, ("chief", "head")),
    (90, ("captain",)),
    (80, ("lieutenant",)),
    (70, ("specialist", "senior", "sr.")),
    (60, ("attending", "paramedic")),
    (50, ("doctor", "physician")),
    (40, ("emt",)),
    (10, ("intern", "trainee")),
)
UNRANKED_PRIORITY = 0


def get_rank_priority(rank: Optional[str]) -> int:
    text = (rank or "").strip().lower()
    if not text:
        return UNRANKED_PRIORITY
    for priority, keywords in RANK_TIERS:
        if any(keyword in text for keyword in keywords):
            return priority
    return UNRANKED_PRIORITY


def _rank_of(user) -> Optional[str]:
    if isinstance(user, dict):
        return user.get("rank")
    return getattr(user, "rank", None)


def sort_users_by_rank(users: Iterable[T]) -> List[T]:
    """Return a new list ordered by rank precedence, highest first.

    Python's sort is stable, so users in the same tier keep their input order.
    Accepts ORM rows, schema objects or plain dicts carrying a ``rank`` value.
    """
    return sorted(users, key=lambda user: -get_rank_priority(_rank_of(user)))
