"""Scoring service - turns graded, attended registrations into house scores."""

import logging
from collections import defaultdict

from festival.domain import HouseId, HouseScore, Leaderboard
from festival.domain.value_objects import points_for
from festival.services.ranking import podium, rank_competition
from festival.stores.interfaces import RegistrationStore

logger = logging.getLogger(__name__)


class ScoringService:
    """Recomputes house scores from current registrations on every call."""

    def __init__(self, store: RegistrationStore) -> None:
        self._store = store

    def compute_house_scores(self) -> list[HouseScore]:
        """Return every house with the points earned by its registrations.

        Only non-cancelled registrations with at least one present mark count,
        and a group registration counts once however large the team.
        """
        totals: dict[HouseId, int] = defaultdict(int)
        for house_id, grade in self._store.scorable_grades():
            totals[house_id] += points_for(grade)
        return [
            HouseScore(house=house, score=totals.get(house.id, 0))
            for house in self._store.list_houses()
        ]

    def leaderboard(self) -> Leaderboard:
        """Return the dense podium and competition standings for the same scores."""
        scores = self.compute_house_scores()
        logger.debug("Leaderboard recomputed for %d houses", len(scores))
        return Leaderboard(
            scores=tuple(scores),
            podium=podium(scores),
            standings=tuple(rank_competition(scores)),
        )
