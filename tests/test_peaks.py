import pytest

from engine.peaks import calculate_peak_probability, find_peaks, gap_statistics


def _with_peaks(length, peak_indices, filler):
    return [12.0 if i in peak_indices else filler for i in range(length)]


class TestGapStatistics:
    def test_find_peaks(self):
        assert find_peaks([1, 10, 3, 25, 9.99], 10.0) == [1, 3]

    def test_requires_two_peaks(self):
        assert gap_statistics([1, 12, 1], 10.0) is None

    def test_gaps(self):
        stats = gap_statistics(_with_peaks(16, {0, 5, 10}, 3.0), 10.0)
        assert stats.current_gap == 5
        assert stats.mean_gap == 5.0
        assert stats.pressure_factor == 1.0
        assert not stats.is_overdue


class TestPeakProbability:
    def test_insufficient_history(self):
        analysis = calculate_peak_probability([1.0, 12.0, 2.0, 3.0])
        assert analysis.probability == 5
        assert "Insufficient peak history" in analysis.text

    def test_base_probability(self):
        analysis = calculate_peak_probability(_with_peaks(16, {0, 5, 10}, 3.0))
        assert analysis.probability == pytest.approx(36.0)
        assert analysis.text.startswith("Last peak 5 turns ago (average gap 5.0).")
        assert analysis.text.endswith("Patience.")

    def test_accumulating(self):
        analysis = calculate_peak_probability(_with_peaks(17, {0, 5, 10}, 3.0))
        assert analysis.probability == pytest.approx(48.0)
        assert "accumulating" in analysis.text

    def test_compression_and_dead_zone_bonuses(self):
        analysis = calculate_peak_probability(_with_peaks(16, {0, 5, 10}, 1.0))
        assert analysis.probability == pytest.approx(61.0)
        assert "Propitious" in analysis.text

    def test_capped_at_99(self):
        analysis = calculate_peak_probability([12.0, 12.0] + [1.0] * 28)
        assert analysis.probability == 99.0
        assert "PEAK IMMINENT" in analysis.text

    def test_to_dict(self):
        data = calculate_peak_probability([1, 2, 3]).to_dict()
        assert set(data) == {"probability", "text"}
