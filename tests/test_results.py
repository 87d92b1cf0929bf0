"""Unit tests for result calculation."""
import pytest

from voteapp.models import Option, Poll
from voteapp.results import percentage, ranked_results, time_ago, total_votes


def make_poll(votes):
    return Poll(
        id="p",
        question="Q",
        options=[Option(id=f"o{i}", text=f"Option {i}", votes=v) for i, v in enumerate(votes)],
        created_at=0,
    )


@pytest.mark.unit
class TestPercentage:
    def test_zero_total(self):
        assert percentage(0, 0) == 0

    def test_known_split(self):
        poll = make_poll([42, 58, 11])
        total = total_votes(poll)
        assert total == 111
        assert [percentage(o.votes, total) for o in poll.options] == [38, 52, 10]

    @pytest.mark.parametrize("votes,total,expected", [(1, 8, 13), (1, 200, 1), (1, 400, 0), (5, 5, 100), (0, 9, 0)])
    def test_rounds_half_up(self, votes, total, expected):
        assert percentage(votes, total) == expected


@pytest.mark.unit
class TestRankedResults:
    def test_sorted_by_votes(self):
        results = ranked_results(make_poll([42, 58, 11]))
        assert [(r.text, r.percentage) for r in results] == [
            ("Option 1", 52),
            ("Option 0", 38),
            ("Option 2", 10),
        ]

    def test_ties_keep_display_order(self):
        results = ranked_results(make_poll([0, 3, 0, 3]))
        assert [r.id for r in results] == ["o1", "o3", "o0", "o2"]

    def test_no_votes(self):
        assert [r.percentage for r in ranked_results(make_poll([0, 0]))] == [0, 0]


@pytest.mark.unit
class TestTimeAgo:
    @pytest.mark.parametrize(
        "age_ms,expected",
        [
            (5_000, "5s ago"),
            (59_999, "59s ago"),
            (60_000, "1m ago"),
            (6 * 3_600_000, "6h ago"),
            (90 * 3_600_000, "3d ago"),
            (-10_000, "0s ago"),
        ],
    )
    def test_buckets(self, age_ms, expected):
        now = 10_000_000_000
        assert time_ago(now - age_ms, now=now) == expected
