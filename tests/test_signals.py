"""Tests for check-in signal aggregation."""

import pytest
from datetime import datetime, timedelta
from sqlalchemy.exc import OperationalError

from weekly_coach.db import Database
from weekly_coach.db.models import WeeklyCheckIn, TrainingSession
from weekly_coach.analysis.recommendations import Energy, RecommendationType
from weekly_coach.analysis.signals import SignalAggregator, get_weekly_recommendation, week_start

# A Wednesday
NOW = datetime(2026, 10, 21, 12, 30)


@pytest.fixture
def db():
    """In-memory database with tables created."""
    database = Database("sqlite://")
    database.create_tables()
    yield database
    database.close()


def add_checkin(db, created_at, weight, user_id="default", week_iso=None, **overrides):
    values = dict(
        user_id=user_id,
        week_iso=week_iso or f"W{created_at:%Y%m%d}",
        average_weight=weight,
        adherence_diet=85,
        rpe_avg=6.0,
        has_pain=False,
        energy_level="normal",
        created_at=created_at,
    )
    values.update(overrides)
    with db.get_session() as session:
        session.add(WeeklyCheckIn(**values))


def add_session(db, session_date, completed=True, user_id="default"):
    with db.get_session() as session:
        session.add(TrainingSession(user_id=user_id, session_date=session_date, completed=completed))


class TestWeekStart:
    """Weeks start on Monday."""

    def test_midweek(self):
        assert week_start(NOW) == datetime(2026, 10, 19)

    def test_monday_is_its_own_start(self):
        assert week_start(datetime(2026, 10, 19, 0, 0)) == datetime(2026, 10, 19)

    def test_sunday_belongs_to_previous_monday(self):
        assert week_start(datetime(2026, 10, 25, 23, 59)) == datetime(2026, 10, 19)


class TestSignalAggregator:
    """Building engine input from stored records."""

    def test_no_checkins_gives_no_input(self, db):
        aggregator = SignalAggregator(db=db)

        assert aggregator.build_input(NOW) is None

    def test_single_checkin_has_no_previous_weight(self, db):
        add_checkin(db, NOW - timedelta(days=1), 80.0)

        params = SignalAggregator(db=db).build_input(NOW)
        assert params.current_weight == 80.0
        assert params.previous_weight is None

    def test_uses_two_most_recent_checkins(self, db):
        add_checkin(db, NOW - timedelta(days=15), 82.0)
        add_checkin(db, NOW - timedelta(days=8), 80.5)
        add_checkin(
            db, NOW - timedelta(days=1), 80.0,
            adherence_diet=70, rpe_avg=8.5, has_pain=True, energy_level="low",
        )

        params = SignalAggregator(db=db).build_input(NOW)
        assert params.current_weight == 80.0
        assert params.previous_weight == 80.5
        assert params.adherence == 70
        assert params.rpe == 8.5
        assert params.has_pain is True
        assert params.energy is Energy.LOW

    def test_checkins_are_scoped_to_user(self, db):
        add_checkin(db, NOW - timedelta(days=1), 80.0, user_id="alice")
        add_checkin(db, NOW - timedelta(days=2), 95.0, user_id="bob")

        params = SignalAggregator(db=db, user_id="alice").build_input(NOW)
        assert params.current_weight == 80.0
        assert params.previous_weight is None

    def test_counts_completed_sessions_this_week_only(self, db):
        add_checkin(db, NOW - timedelta(days=1), 80.0)
        add_session(db, datetime(2026, 10, 19, 7, 0))  # Monday
        add_session(db, datetime(2026, 10, 20, 18, 0))  # Tuesday
        add_session(db, datetime(2026, 10, 21, 8, 0), completed=False)
        add_session(db, datetime(2026, 10, 18, 10, 0))  # previous Sunday
        add_session(db, datetime(2026, 10, 20, 18, 0), user_id="someone-else")

        params = SignalAggregator(db=db).build_input(NOW)
        assert params.sessions_completed == 2

    def test_no_sessions_counts_zero(self, db):
        add_checkin(db, NOW - timedelta(days=1), 80.0)

        assert SignalAggregator(db=db).build_input(NOW).sessions_completed == 0

    def test_read_failure_propagates(self):
        database = Database("sqlite://")  # tables never created

        with pytest.raises(OperationalError):
            SignalAggregator(db=database).build_input(NOW)


class TestWeeklyRecommendation:
    """Aggregator and engine together."""

    def test_insufficient_data_is_none(self, db):
        assert get_weekly_recommendation(db=db, now=NOW) is None

    def test_steady_progress_adds_volume(self, db):
        add_checkin(db, NOW - timedelta(days=8), 80.5)
        add_checkin(db, NOW - timedelta(days=1), 80.0)
        add_session(db, datetime(2026, 10, 19, 7, 0))
        add_session(db, datetime(2026, 10, 20, 7, 0))
        add_session(db, datetime(2026, 10, 21, 7, 0))

        rec = get_weekly_recommendation(db=db, now=NOW, language="en")
        assert rec.type == RecommendationType.TRAINING
        assert rec.action == "+1 set"

    def test_first_checkin_with_good_adherence_cuts_calories(self, db):
        add_checkin(db, NOW - timedelta(days=1), 80.0, adherence_diet=90)

        rec = get_weekly_recommendation(db=db, now=NOW, language="en")
        assert rec.action == "-150kcal"
