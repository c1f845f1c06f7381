from datetime import date

from jobtracker.utils.dates import format_start_date

TODAY = date(2026, 3, 10)


class TestFormatStartDate:
    def test_missing(self):
        assert format_start_date(None, TODAY) is None
        assert format_start_date("   ", TODAY) is None

    def test_immediate_phrases(self):
        assert format_start_date("Ab Sofort", TODAY) == "ab sofort"
        assert format_start_date("abSofort möglich", TODAY) == "ab sofort"
        assert format_start_date("immediately", TODAY) == "ab sofort"

    def test_past_or_today_is_immediate(self):
        assert format_start_date("2026-03-10", TODAY) == "ab sofort"
        assert format_start_date("2025-12-01", TODAY) == "ab sofort"

    def test_future_date_formatted(self):
        assert format_start_date("2026-04-01", TODAY) == "01.04.2026"
        assert format_start_date("15.05.2026", TODAY) == "15.05.2026"

    def test_free_text_kept(self):
        assert format_start_date(" nach Vereinbarung ", TODAY) == "nach Vereinbarung"
