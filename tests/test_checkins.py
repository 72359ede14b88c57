"""Tests for check-in recording and the adjustments journal."""

import pytest
from datetime import datetime, timedelta

from weekly_coach.db import Database
from weekly_coach.checkins import CheckInService, CheckInError, iso_week
from weekly_coach.analysis.recommendations import RecommendationInput, evaluate
from weekly_coach.analysis.signals import get_weekly_recommendation

NOW = datetime(2026, 10, 21, 12, 30)


class TestIsoWeek:
    """ISO week labels."""

    def test_label_format(self):
        assert iso_week(NOW) == "2026-W43"

    def test_year_boundary_uses_iso_year(self):
        # 2026-12-31 is a Thursday in ISO week 53 of 2026
        assert iso_week(datetime(2026, 12, 31)) == "2026-W53"
        # 2027-01-01 belongs to the same ISO week
        assert iso_week(datetime(2027, 1, 1)) == "2026-W53"


class TestCheckInService:
    """Check-in and session storage."""

    def setup_method(self):
        """Set up test fixtures."""
        self.db = Database("sqlite://")
        self.db.create_tables()
        self.service = CheckInService(db=self.db, user_id="alice")

    def teardown_method(self):
        self.db.close()

    def record(self, weights=(80.0,), now=NOW, **overrides):
        values = dict(adherence=85, rpe=6.0, has_pain=False, energy="normal")
        values.update(overrides)
        return self.service.record_checkin(weights=list(weights), now=now, **values)

    def test_averages_weight_measurements(self):
        self.record(weights=(80.0, 80.4, 80.2))

        checkin = self.service.get_checkin(iso_week(NOW))
        assert checkin.average_weight == pytest.approx(80.2)
        assert checkin.weight_measure_1 == 80.0
        assert checkin.weight_measure_3 == 80.2

    def test_missing_measurements_are_ignored(self):
        self.record(weights=(None, 79.0, None))

        checkin = self.service.get_checkin(iso_week(NOW))
        assert checkin.average_weight == 79.0
        assert checkin.weight_measure_1 == 79.0
        assert checkin.weight_measure_2 is None

    def test_requires_a_weight(self):
        with pytest.raises(CheckInError):
            self.record(weights=(None,))

    def test_rejects_too_many_weights(self):
        with pytest.raises(CheckInError):
            self.record(weights=(80.0, 80.1, 80.2, 80.3))

    @pytest.mark.parametrize("weight", [0.0, -80.0, float("inf"), float("nan")])
    def test_rejects_invalid_weight(self, weight):
        with pytest.raises(CheckInError, match="Weight"):
            self.record(weights=(80.0, weight))

    def test_rejects_unknown_energy(self):
        with pytest.raises(CheckInError):
            self.record(energy="tired")

    @pytest.mark.parametrize("adherence", [120, -5, None, 85.5])
    def test_rejects_invalid_adherence(self, adherence):
        with pytest.raises(CheckInError, match="Adherence"):
            self.record(adherence=adherence)

    @pytest.mark.parametrize("rpe", [15, -1, None, float("nan"), True])
    def test_rejects_invalid_rpe(self, rpe):
        with pytest.raises(CheckInError, match="RPE"):
            self.record(rpe=rpe)

    def test_rejects_non_boolean_pain_flag(self):
        with pytest.raises(CheckInError, match="Pain flag"):
            self.record(has_pain=None)

    def test_rejected_checkin_is_not_stored(self):
        with pytest.raises(CheckInError):
            self.record(rpe=15)

        assert not self.service.has_checkin_this_week(now=NOW)

    def test_one_checkin_per_week(self):
        self.record()

        with pytest.raises(CheckInError, match="already exists"):
            self.record(now=NOW + timedelta(days=2))

    def test_other_users_do_not_conflict(self):
        self.record()
        other = CheckInService(db=self.db, user_id="bob")

        assert other.record_checkin(
            weights=[70.0], adherence=90, rpe=5, has_pain=False, energy="high", now=NOW
        )

    def test_has_checkin_this_week(self):
        assert not self.service.has_checkin_this_week(NOW)

        self.record()

        assert self.service.has_checkin_this_week(NOW)
        assert not self.service.has_checkin_this_week(NOW + timedelta(weeks=1))

    def test_weight_delta(self):
        assert self.service.weight_delta(NOW) is None

        self.record(weights=(81.0,), now=NOW - timedelta(weeks=1))
        assert self.service.weight_delta(NOW) is None

        self.record(weights=(80.2,))
        assert self.service.weight_delta(NOW) == pytest.approx(-0.8)

    def test_recorded_data_feeds_recommendation(self):
        self.record(weights=(80.5,), now=NOW - timedelta(weeks=1))
        self.record(weights=(80.0,))
        for day in (19, 20):
            self.service.record_session(session_date=datetime(2026, 10, day, 7, 0))
        self.service.record_session(session_date=datetime(2026, 10, 21, 7, 0), completed=False)

        rec = get_weekly_recommendation(user_id="alice", db=self.db, now=NOW)
        assert rec.action == "+1 set"


class TestAdjustmentsJournal:
    """Journal of saved recommendations."""

    def setup_method(self):
        """Set up test fixtures."""
        self.db = Database("sqlite://")
        self.db.create_tables()
        self.service = CheckInService(db=self.db, user_id="alice")

    def teardown_method(self):
        self.db.close()

    @staticmethod
    def recommendation(**overrides):
        values = dict(
            current_weight=80.0, previous_weight=80.5, adherence=85, rpe=8,
            has_pain=False, energy="normal", sessions_completed=3,
        )
        values.update(overrides)
        return evaluate(RecommendationInput(**values), language="en")

    def test_nutrition_is_journaled_as_calories(self):
        rec = self.recommendation(previous_weight=80.1)

        entry_id = self.service.log_adjustment(rec, old_value="2000kcal")

        assert entry_id is not None
        [entry] = self.service.get_adjustments()
        assert entry["type"] == "calories"
        assert entry["old_value"] == "2000kcal"
        assert entry["new_value"] == "-150kcal"
        assert entry["reason"] == rec.reason

    def test_training_is_journaled_as_volume(self):
        self.service.log_adjustment(self.recommendation(has_pain=True))

        [entry] = self.service.get_adjustments()
        assert entry["type"] == "volume"
        assert entry["new_value"] == "-1 set"

    def test_no_change_is_not_journaled(self):
        assert self.service.log_adjustment(self.recommendation()) is None
        assert self.service.get_adjustments() == []

    def test_newest_first_with_limit(self):
        self.service.log_adjustment(self.recommendation(previous_weight=80.1))
        self.service.log_adjustment(self.recommendation(has_pain=True))
        self.service.log_adjustment(self.recommendation(rpe=6))

        entries = self.service.get_adjustments(limit=2)
        assert [e["new_value"] for e in entries] == ["+1 set", "-1 set"]
