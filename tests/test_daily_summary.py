from datetime import date, datetime

import pytest
from sqlalchemy.exc import IntegrityError

from calcount.models.daily_summary import DailySummary
from calcount.services import daily_summary, entry_store, food_log
from calcount.services.daily_summary import MAX_HISTORY_DAYS

from tests.conftest import USER_A, USER_B, ConflictingSession

DAY = date(2026, 3, 10)


def _assert_matches_entries(db, user_id, day, tz):
    summary = daily_summary.get_summary(db, user_id, day)
    totals = daily_summary.sum_entries(entry_store.entries_for_day(db, user_id, day, tz))
    assert summary.total_calories == totals["total_calories"]
    assert summary.total_protein == pytest.approx(totals["total_protein"])
    assert summary.total_carbs == pytest.approx(totals["total_carbs"])
    assert summary.total_fats == pytest.approx(totals["total_fats"])
    return summary


class TestRecompute:
    @pytest.mark.parametrize("order", [(300, 450, 220), (220, 300, 450), (450, 220, 300)])
    def test_sum_independent_of_order(self, db, utc, entry_fields, order):
        for calories in order:
            food_log.log_entry(db, USER_A, entry_fields(calories=calories), utc)

        summary = daily_summary.get_summary(db, USER_A, DAY)
        assert summary.total_calories == 970
        assert summary.total_protein == pytest.approx(30.0)

    def test_add_edit_delete_keep_summary_in_sync(self, db, utc, entry_fields):
        first = food_log.log_entry(db, USER_A, entry_fields(calories=300), utc)
        second = food_log.log_entry(db, USER_A, entry_fields(calories=450, protein=32.5), utc)
        _assert_matches_entries(db, USER_A, DAY, utc)

        food_log.edit_entry(db, first.id, USER_A, {"calories": 310, "fats": 7.5}, utc)
        assert _assert_matches_entries(db, USER_A, DAY, utc).total_calories == 760

        food_log.remove_entry(db, second.id, USER_A, utc)
        summary = _assert_matches_entries(db, USER_A, DAY, utc)
        assert summary.total_calories == 310
        assert summary.total_fats == pytest.approx(7.5)

    def test_moving_entry_recomputes_both_days(self, db, utc, entry_fields):
        entry = food_log.log_entry(db, USER_A, entry_fields(calories=500), utc)
        food_log.log_entry(db, USER_A, entry_fields(calories=200), utc)

        food_log.edit_entry(db, entry.id, USER_A, {"date": datetime(2026, 3, 11, 9, 0)}, utc)

        assert daily_summary.get_summary(db, USER_A, DAY).total_calories == 200
        assert daily_summary.get_summary(db, USER_A, date(2026, 3, 11)).total_calories == 500

    def test_deleting_last_entry_leaves_zero_row(self, db, utc, entry_fields):
        entry = food_log.log_entry(db, USER_A, entry_fields(), utc)
        food_log.remove_entry(db, entry.id, USER_A, utc)

        assert daily_summary.get_summary(db, USER_A, DAY).total_calories == 0
        assert db.query(DailySummary).count() == 1

    def test_single_row_per_user_day(self, db, utc, entry_fields):
        for _ in range(3):
            food_log.log_entry(db, USER_A, entry_fields(), utc)
        daily_summary.recompute(db, USER_A, DAY, utc)

        assert db.query(DailySummary).filter(DailySummary.user_id == USER_A).count() == 1

    def test_day_bucket_uses_request_timezone(self, db, berlin, entry_fields):
        food_log.log_entry(db, USER_A, entry_fields(calories=400, when=datetime(2026, 3, 10, 0, 30)), berlin)

        assert daily_summary.get_summary(db, USER_A, DAY).total_calories == 400
        assert daily_summary.get_summary(db, USER_A, date(2026, 3, 9)).total_calories == 0


class TestOwnership:
    def test_foreign_delete_leaves_owner_untouched(self, db, utc, entry_fields):
        entry = food_log.log_entry(db, USER_A, entry_fields(calories=300), utc)

        assert food_log.remove_entry(db, entry.id, USER_B, utc) is None

        assert entry_store.get_entry(db, entry.id, USER_A) is not None
        assert daily_summary.get_summary(db, USER_A, DAY).total_calories == 300
        assert daily_summary.get_summary(db, USER_B, DAY).total_calories == 0

    def test_foreign_edit_is_noop(self, db, utc, entry_fields):
        entry = food_log.log_entry(db, USER_A, entry_fields(calories=300), utc)

        assert food_log.edit_entry(db, entry.id, USER_B, {"calories": 5}, utc) is None
        assert daily_summary.get_summary(db, USER_A, DAY).total_calories == 300


class TestGetSummary:
    def test_missing_row_is_zero_and_not_created(self, db):
        summary = daily_summary.get_summary(db, USER_A, DAY)

        assert summary.date == DAY
        assert summary.total_calories == 0
        assert summary.total_protein == 0.0
        assert db.query(DailySummary).count() == 0


class TestSummariesBetween:
    def test_zero_filled_range(self, db, utc, entry_fields):
        food_log.log_entry(db, USER_A, entry_fields(calories=800, when=datetime(2026, 3, 9, 12, 0)), utc)
        food_log.log_entry(db, USER_A, entry_fields(calories=600, when=datetime(2026, 3, 11, 12, 0)), utc)

        days = daily_summary.summaries_between(db, USER_A, date(2026, 3, 8), date(2026, 3, 12))
        assert [d.date.day for d in days] == [8, 9, 10, 11, 12]
        assert [d.total_calories for d in days] == [0, 800, 0, 600, 0]

    def test_end_before_start(self, db):
        with pytest.raises(ValueError, match="before start"):
            daily_summary.summaries_between(db, USER_A, date(2026, 3, 10), date(2026, 3, 9))

    def test_range_limit(self, db):
        start = date(2025, 1, 1)
        end = date.fromordinal(start.toordinal() + MAX_HISTORY_DAYS)
        with pytest.raises(ValueError, match="exceed"):
            daily_summary.summaries_between(db, USER_A, start, end)


class TestConcurrentInsert:
    def test_conflict_merges_into_existing_row(self, db, utc, entry_fields, monkeypatch):
        food_log.log_entry(db, USER_A, entry_fields(calories=300), utc)
        food_log.log_entry(db, USER_A, entry_fields(calories=200), utc)

        # first lookup misses, as if another request inserted the row meanwhile
        real_find_row = daily_summary._find_row
        lookups = []

        def find_row(session, user_id, day):
            lookups.append(day)
            return None if len(lookups) == 1 else real_find_row(session, user_id, day)

        monkeypatch.setattr(daily_summary, "_find_row", find_row)
        daily_summary.recompute(db, USER_A, DAY, utc)
        monkeypatch.undo()

        assert daily_summary.get_summary(db, USER_A, DAY).total_calories == 500
        assert db.query(DailySummary).count() == 1

    def test_conflict_without_row_reraises(self, utc, monkeypatch):
        monkeypatch.setattr(entry_store, "entries_for_day", lambda db, user_id, day, tz: [])
        monkeypatch.setattr(daily_summary, "_find_row", lambda db, user_id, day: None)
        session = ConflictingSession()

        with pytest.raises(IntegrityError):
            daily_summary.recompute(session, USER_A, DAY, utc)
        assert session.rolled_back
