import random

from helpers import entries_from, random_entries

from rangetree.centered import QueryTag, build, generate_range_queries
from rangetree.core.models import Interval


class TestGenerateRangeQueries:
    def test_empty_entries_produce_no_queries(self) -> None:
        assert generate_range_queries([], random.Random(0)) == []

    def test_covers_every_tag(self) -> None:
        entries = random_entries(random.Random(1), 30)
        queries = generate_range_queries(entries, random.Random(2))
        assert {query.tag for query in queries} == set(QueryTag)

    def test_first_query_is_full_coverage(self) -> None:
        entries = entries_from((10, 20), (15, 25), (30, 40))
        queries = generate_range_queries(entries, random.Random(3))
        assert queries[0].tag == QueryTag.COVERAGE
        assert queries[0].interval == Interval.closed_open(10, 40)
        assert queries[0].expected_count == 3

    def test_intervals_are_unique(self) -> None:
        entries = entries_from((0, 5), (0, 5), (0, 5))
        queries = generate_range_queries(entries, random.Random(4))
        intervals = [query.interval for query in queries]
        assert len(intervals) == len(set(intervals))

    def test_adversarial_queries_find_nothing(self) -> None:
        entries = entries_from((10, 20), (15, 25))
        queries = generate_range_queries(entries, random.Random(5))
        adversarial = [q for q in queries if q.tag == QueryTag.ADVERSARIAL]
        assert adversarial
        assert all(query.expected_count == 0 for query in adversarial)

    def test_is_deterministic_for_a_seed(self) -> None:
        entries = random_entries(random.Random(6), 40)
        first = generate_range_queries(entries, random.Random(7))
        second = generate_range_queries(entries, random.Random(7))
        assert first == second

    def test_float_coordinates(self) -> None:
        entries = random_entries(random.Random(8), 25, as_float=True)
        queries = generate_range_queries(entries, random.Random(9))
        assert any(
            isinstance(query.interval.lower, float)
            for query in queries
            if query.tag == QueryTag.TYPICAL
        )

    def test_tree_agrees_with_expected_counts(self) -> None:
        rng = random.Random(10)
        entries = random_entries(rng, 200, mixed_bounds=True)
        tree = build(entries)
        for query in generate_range_queries(entries, rng, n_typical=50):
            assert tree.count(query.interval) == query.expected_count, (
                query.tag,
                str(query.interval),
            )
