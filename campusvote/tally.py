"""Result aggregation.

Counts come straight from committed vote rows on every call. Percentages are
rounded per candidate (half up), so a position's percentages can sum to 99
or 101; that is expected.
"""
from typing import List, Optional

from campusvote.schemas import CandidateResult, PositionResult


def percentage(votes: int, total: int) -> int:
    """round(votes / total * 100) with halves rounded up, 0 when total is 0."""
    if total <= 0:
        return 0
    return (votes * 200 + total) // (2 * total)


def rank_candidates(candidates, counts) -> List[CandidateResult]:
    total = sum(counts.get(c.id, 0) for c in candidates)
    results = [
        CandidateResult(
            id=c.id,
            name=c.name,
            photo_url=c.photo_url,
            manifesto=c.manifesto,
            votes=counts.get(c.id, 0),
            percentage=percentage(counts.get(c.id, 0), total),
        )
        for c in candidates
    ]
    # most votes first; equal counts fall back to candidate id
    results.sort(key=lambda r: (-r.votes, r.id))
    return results


def compute_results(storage, position_id: Optional[str] = None) -> List[PositionResult]:
    """
    Tally every position, or only ``position_id`` when given.

    An unknown ``position_id`` gives an empty list.
    """
    if position_id is not None:
        position = storage.get_position(position_id)
        positions = [position] if position is not None else []
    else:
        positions = storage.list_positions()
    if not positions:
        return []

    counts = storage.count_votes([p.id for p in positions])
    results = []
    for position in positions:
        candidates = rank_candidates(storage.list_candidates(position.id), counts)
        results.append(
            PositionResult(
                position_id=position.id,
                position_title=position.title,
                total_votes=sum(c.votes for c in candidates),
                candidates=candidates,
            )
        )
    return results
