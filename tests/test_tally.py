import pytest

from campusvote.ballot import submit_ballot
from campusvote.security import Identity
from campusvote.status import get_status
from campusvote.tally import compute_results, percentage


@pytest.mark.parametrize("votes,total,expected", [
    (0, 0, 0),
    (3, 0, 0),
    (2, 5, 40),
    (1, 5, 20),
    (1, 3, 33),
    (2, 3, 67),
    (1, 8, 13),  # 12.5 rounds up
    (5, 5, 100),
])
def test_percentage(votes, total, expected):
    assert percentage(votes, total) == expected


@pytest.fixture
def cast(storage, election, make_student, pick):
    def _cast(*pairs):
        student = make_student()
        result = submit_ballot(storage, get_status(storage), Identity(student.id), pick(*pairs))
        assert result.votes_submitted == len(pairs)
    return _cast


def test_no_votes(storage, ballot):
    results = compute_results(storage)
    assert [r.position_title for r in results] == ["President", "Secretary"]
    for result in results:
        assert result.total_votes == 0
        assert all(c.votes == 0 and c.percentage == 0 for c in result.candidates)


def test_unknown_position_is_empty(storage, ballot):
    assert compute_results(storage, "missing") == []


def test_ranking_and_percentages(storage, ballot, cast):
    third = storage.save_candidate(ballot.president.id, "Eve")
    for candidate in (ballot.alice, ballot.alice, ballot.bob, ballot.bob, third):
        cast((ballot.president, candidate))

    [result] = compute_results(storage, ballot.president.id)
    assert result.total_votes == 5
    assert [c.votes for c in result.candidates] == [2, 2, 1]
    assert [c.percentage for c in result.candidates] == [40, 40, 20]
    assert result.candidates[2].id == third.id
    tied = [c.id for c in result.candidates[:2]]
    assert tied == sorted([ballot.alice.id, ballot.bob.id])


def test_percentages_need_not_sum_to_100(storage, ballot, cast):
    third = storage.save_candidate(ballot.president.id, "Eve")
    for candidate in (ballot.alice, ballot.bob, third):
        cast((ballot.president, candidate))

    [result] = compute_results(storage, ballot.president.id)
    assert [c.percentage for c in result.candidates] == [33, 33, 33]
    assert sum(c.percentage for c in result.candidates) == 99


def test_totals_and_bounds_across_positions(storage, ballot, cast):
    cast((ballot.president, ballot.alice), (ballot.secretary, ballot.carol))
    cast((ballot.president, ballot.bob), (ballot.secretary, ballot.carol))
    cast((ballot.secretary, ballot.dave))

    for result in compute_results(storage):
        assert result.total_votes == sum(c.votes for c in result.candidates)
        assert all(0 <= c.percentage <= 100 for c in result.candidates)

    secretary = compute_results(storage, ballot.secretary.id)[0]
    assert [(c.name, c.votes, c.percentage) for c in secretary.candidates] == [
        ("Carol", 2, 67),
        ("Dave", 1, 33),
    ]


def test_repeatable(storage, ballot, cast):
    cast((ballot.president, ballot.bob), (ballot.secretary, ballot.dave))
    cast((ballot.president, ballot.alice))
    assert compute_results(storage) == compute_results(storage)


def test_pending_votes_not_counted(storage, ballot, student):
    storage.votes.insert_one({
        "_id": "pending",
        "student_id": student.id,
        "position_id": ballot.president.id,
        "candidate_id": ballot.alice.id,
        "ballot_id": "b",
        "committed": False,
    })
    [result] = compute_results(storage, ballot.president.id)
    assert result.total_votes == 0
