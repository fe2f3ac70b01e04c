"""Leaderboard ranking with ties.

Every view starts from :func:`order_by_score`, so dense tiers, the podium
and competition standings always agree on relative order.
"""

from collections.abc import Iterable, Mapping

from festival.domain import House, HouseScore, Podium, RankedHouse

Scores = Iterable[HouseScore] | Mapping[House, int]


def _as_scores(scores: Scores) -> list[HouseScore]:
    if isinstance(scores, Mapping):
        return [HouseScore(house=house, score=score) for house, score in scores.items()]
    return list(scores)


def order_by_score(scores: Scores) -> list[HouseScore]:
    """Sort by score descending; ties keep the order they were supplied in."""
    return sorted(_as_scores(scores), key=lambda item: item.score, reverse=True)


def rank_dense(scores: Scores) -> list[list[HouseScore]]:
    """Group houses into tiers, one per distinct score, best first.

    Tier ``n`` (0-based) holds dense rank ``n + 1``: ties share a rank and
    the next distinct score takes the very next rank number.
    """
    tiers: list[list[HouseScore]] = []
    for item in order_by_score(scores):
        if tiers and tiers[-1][0].score == item.score:
            tiers[-1].append(item)
        else:
            tiers.append([item])
    return tiers


def podium(scores: Scores) -> Podium:
    """Top three dense tiers, plus everything below them numbered onwards."""
    tiers = rank_dense(scores)
    top = [tuple(tier) for tier in tiers[:3]]
    top += [()] * (3 - len(top))

    rest: list[RankedHouse] = []
    position = sum(len(tier) for tier in top) + 1
    for tier in tiers[3:]:
        for item in tier:
            rest.append(RankedHouse(rank=position, house=item.house, score=item.score))
            position += 1

    return Podium(rank1=top[0], rank2=top[1], rank3=top[2], rest=tuple(rest))


def rank_competition(scores: Scores) -> list[RankedHouse]:
    """Standard competition ranking (1, 1, 3): ties share the rank of their first position."""
    ranked: list[RankedHouse] = []
    for position, item in enumerate(order_by_score(scores), start=1):
        if ranked and ranked[-1].score == item.score:
            rank = ranked[-1].rank
        else:
            rank = position
        ranked.append(RankedHouse(rank=rank, house=item.house, score=item.score))
    return ranked
