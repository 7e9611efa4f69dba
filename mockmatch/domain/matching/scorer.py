"""
Best-match scoring

Ranks candidate peers for a viewer by a weighted similarity score:

    match_score = 0.4 * experience_score + 0.6 * skill_score

experience_score is 1.0 for the same level, 0.5 for adjacent levels on the
beginner < intermediate < advanced scale and 0.0 otherwise. skill_score is
the share of the viewer's distinct skills that the candidate also lists.
These functions are pure; they never touch the database.
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from ...models import EXPERIENCE_LEVELS, User

EXPERIENCE_WEIGHT = 0.4
SKILL_WEIGHT = 0.6
DEFAULT_LIMIT = 5


@dataclass(frozen=True)
class ScoredCandidate:
    user: User
    match_score: float
    experience_score: float
    skill_score: float


def _level_rank(level: Optional[str]) -> Optional[int]:
    if not level:
        return None
    try:
        return EXPERIENCE_LEVELS.index(level.lower())
    except ValueError:
        return None


def experience_score(viewer_level: Optional[str], candidate_level: Optional[str]) -> float:
    viewer_rank = _level_rank(viewer_level)
    candidate_rank = _level_rank(candidate_level)
    if viewer_rank is None or candidate_rank is None:
        return 0.0
    if viewer_rank == candidate_rank:
        return 1.0
    if abs(viewer_rank - candidate_rank) == 1:
        return 0.5
    return 0.0


def skill_score(viewer_skills: Iterable[str], candidate_skills: Iterable[str]) -> float:
    mine = {s.lower() for s in viewer_skills or []}
    if not mine:
        return 0.0
    theirs = {s.lower() for s in candidate_skills or []}
    return len(mine & theirs) / len(mine)


def score_candidate(viewer: User, candidate: User) -> ScoredCandidate:
    exp = experience_score(viewer.experience_level, candidate.experience_level)
    skills = skill_score(viewer.skills, candidate.skills)
    return ScoredCandidate(
        user=candidate,
        match_score=EXPERIENCE_WEIGHT * exp + SKILL_WEIGHT * skills,
        experience_score=exp,
        skill_score=skills,
    )


def rank_best_matches(
    viewer: User, candidates: Iterable[User], limit: int = DEFAULT_LIMIT
) -> list[ScoredCandidate]:
    """Score every candidate except the viewer and return the top `limit`, best first.

    Ties keep the order of `candidates` (sorted() is stable).
    """
    scored = [score_candidate(viewer, c) for c in candidates if c.id != viewer.id]
    scored = sorted(scored, key=lambda s: s.match_score, reverse=True)
    return scored[: max(0, limit)]
