"""Tests for rating aggregation."""
import pytest

from course_eval.services.aggregator import (
    SCORE_DOMAIN,
    MetricBucket,
    ScoreOutOfRangeError,
    aggregate,
    by_day,
    by_sentence,
    by_subject,
    ordered_buckets,
    overall,
    parse_timestamp,
)


@pytest.fixture
def sample():
    return [
        {"sentence": "S1", "score": 5, "subject_id": "a", "created_at": "2024-05-10T09:00:00Z"},
        {"sentence": "S1", "score": 3, "subject_id": "b", "created_at": "2024-05-10T23:30:00Z"},
        {"sentence": "S2", "score": 0, "subject_id": "a", "created_at": "2024-05-11T08:00:00Z"},
    ]


class TestAggregateBySentence:
    """Grouping by survey sentence."""

    def test_end_to_end_example(self, sample):
        buckets = aggregate(sample, by_sentence)

        s1 = buckets["S1"]
        assert s1.average == 4.0
        assert s1.response_count == 2
        assert s1.histogram == {0: 0, 1: 0, 2: 0, 3: 1, 4: 0, 5: 1}

        s2 = buckets["S2"]
        assert s2.average == 0.0
        assert s2.response_count == 1
        assert s2.histogram == {0: 1, 1: 0, 2: 0, 3: 0, 4: 0, 5: 0}

    def test_histogram_counts_match_responses(self, sample):
        for bucket in aggregate(sample * 7, by_sentence).values():
            assert sum(bucket.histogram.values()) == bucket.response_count

    def test_percentages_sum_to_100(self, sample):
        records = sample + [{"sentence": "S1", "score": s} for s in (1, 2, 4, 4)]
        for bucket in aggregate(records, by_sentence).values():
            assert abs(sum(bucket.percentage_by_score.values()) - 100) < 1e-9

    def test_every_bin_present(self, sample):
        for bucket in aggregate(sample, by_sentence).values():
            assert tuple(bucket.histogram) == SCORE_DOMAIN
            assert tuple(bucket.percentage_by_score) == SCORE_DOMAIN

    def test_sentence_whitespace_is_normalised(self):
        buckets = aggregate(
            [{"sentence": "  O professor   explica bem ", "score": 4}, {"sentence": "O professor explica bem", "score": 2}],
            by_sentence,
        )
        assert list(buckets) == ["O professor explica bem"]
        assert buckets["O professor explica bem"].response_count == 2


class TestOtherGroupings:
    def test_by_subject(self, sample):
        buckets = aggregate(sample, by_subject)
        assert buckets["a"].response_count == 2
        assert buckets["a"].average == 2.5
        assert buckets["b"].average == 3.0

    def test_by_day_uses_utc_date(self, sample):
        records = sample + [{"sentence": "S3", "score": 2, "created_at": "2024-05-11T01:00:00-03:00"}]
        buckets = aggregate(records, by_day)
        assert set(buckets) == {"2024-05-10", "2024-05-11"}
        assert buckets["2024-05-10"].response_count == 2
        assert buckets["2024-05-11"].response_count == 2

    def test_naive_timestamp_treated_as_utc(self):
        assert by_day({"created_at": "2024-01-02T23:59:59"}) == "2024-01-02"

    def test_trimmed_fractional_seconds_are_counted(self):
        """Postgres drops trailing zeros from the fraction; none of these rows may be lost."""
        records = [
            {"sentence": "S1", "score": 5, "created_at": "2024-05-10T12:00:00.123456+00:00"},
            {"sentence": "S1", "score": 4, "created_at": "2024-05-10T12:00:00.12345+00:00"},
            {"sentence": "S1", "score": 3, "created_at": "2024-05-10T12:00:00.5+00:00"},
            {"sentence": "S1", "score": 2, "created_at": "2024-05-10T12:00:00.1234567Z"},
        ]
        buckets = aggregate(records, by_day)
        assert buckets["2024-05-10"].response_count == 4

    def test_parse_timestamp_keeps_fraction_value(self):
        assert parse_timestamp("2024-05-10T12:00:00.5+00:00").microsecond == 500000
        assert parse_timestamp("2024-05-10T12:00:00.12345Z").microsecond == 123450


class TestEdgeCases:
    def test_empty_input(self):
        assert aggregate([], by_sentence) == {}

    def test_missing_key_is_skipped(self):
        records = [
            {"score": 5},
            {"sentence": "   ", "score": 5},
            {"sentence": None, "score": 1},
            {"sentence": "S1", "score": 2},
            {"sentence": "S1", "score": 1, "created_at": "not a date"},
        ]
        assert list(aggregate(records, by_sentence)) == ["S1"]
        assert aggregate(records, by_day) == {}

    @pytest.mark.parametrize("score", [-1, 6, 2.5, "3", None, True])
    def test_out_of_domain_score_rejected(self, score):
        with pytest.raises(ScoreOutOfRangeError):
            aggregate([{"sentence": "S1", "score": score}], by_sentence)

    def test_integral_float_accepted(self):
        assert aggregate([{"sentence": "S1", "score": 4.0}], by_sentence)["S1"].histogram[4] == 1

    def test_idempotent(self, sample):
        first = aggregate(sample, by_sentence)
        second = aggregate(sample, by_sentence)
        assert first == second
        assert sample[0] == {"sentence": "S1", "score": 5, "subject_id": "a", "created_at": "2024-05-10T09:00:00Z"}


class TestOrderingAndSummaries:
    def test_ordered_by_key(self):
        buckets = aggregate([{"sentence": s, "score": 1} for s in ("c", "a", "b")], by_sentence)
        assert [k for k, _ in ordered_buckets(buckets)] == ["a", "b", "c"]

    def test_overall(self, sample):
        bucket = overall(sample)
        assert bucket.response_count == 3
        assert bucket.average == pytest.approx(8 / 3)

    def test_overall_empty(self):
        bucket = overall([])
        assert bucket.response_count == 0
        assert bucket.average == 0.0
        assert sum(bucket.percentage_by_score.values()) == 0

    def test_to_dict(self):
        bucket = aggregate([{"sentence": "S1", "score": 5}, {"sentence": "S1", "score": 4}], by_sentence)["S1"]
        data = bucket.to_dict()
        assert data["averageScore"] == 4.5
        assert data["numberOfResponses"] == 2
        assert data["scoreDistribution"]["5"] == 1
        assert data["percentageByScore"]["4"] == 50.0
        assert isinstance(MetricBucket(key="x").to_dict()["scoreDistribution"], dict)
