import random
from datetime import date, datetime, timedelta

from formcraft.models.form import FormStatus, Submission, ViewRecord
from formcraft.services.analytics import (
    AnalyticsService,
    classify_device,
    classify_referrer,
    conversion_rate,
    daily_series,
    estimated_daily_views,
    summarize,
)


def test_conversion_rate_without_views_is_zero():
    assert conversion_rate(0, 0) == 0.0
    assert conversion_rate(0, 5) == 0.0
    assert conversion_rate(4, 1) == 25.0


def test_daily_series_counts_per_day():
    start = date(2024, 3, 1)
    submissions = [
        Submission(form_id="f", data={}, created_at=datetime(2024, 3, 1, 9)),
        Submission(form_id="f", data={}, created_at=datetime(2024, 3, 1, 23, 59)),
    ]
    series = daily_series(start, start + timedelta(days=2), submissions)
    assert [p.submissions for p in series] == [2, 0, 0]
    assert [p.date for p in series] == [date(2024, 3, 1), date(2024, 3, 2), date(2024, 3, 3)]


def test_reversed_range_is_empty():
    assert daily_series(date(2024, 3, 5), date(2024, 3, 1), []) == []
    assert estimated_daily_views(date(2024, 3, 5), date(2024, 3, 1), [(10, date(2024, 1, 1))]) == {}


def test_device_classification():
    assert classify_device("Mozilla/5.0 (iPhone; CPU iPhone OS 17_0)") == "Mobile"
    assert classify_device("Mozilla/5.0 (Linux; Android 14)") == "Mobile"
    assert classify_device("Mozilla/5.0 (Windows NT 10.0; Win64; x64)") == "Desktop"
    assert classify_device(None) == "Desktop"
    assert classify_device("Mozilla/5.0 (Windows NT 10.0)", {"deviceType": "Tablet"}) == "Tablet"


def test_referrer_classification():
    assert classify_referrer("https://www.google.com/search?q=forms") == "www.google.com"
    assert classify_referrer(None) == "Direct"
    assert classify_referrer("") == "Direct"
    assert classify_referrer("not a url") == "Direct"


def test_summarize_breakdowns():
    views = [
        ViewRecord(form_id="f", user_agent="iPhone", referrer="https://t.co/x", geo_location={"country": "IN"}),
        ViewRecord(form_id="f", user_agent="Windows", referrer=None, geo_location=None),
        ViewRecord(form_id="f", user_agent="Windows", referrer="https://t.co/y", geo_location={"country": "IN"}),
        ViewRecord(form_id="f", user_agent="Android", referrer=None, geo_location={}),
    ]
    submissions = [Submission(form_id="f", data={})]
    summary = summarize(views, submissions)
    assert summary.total_views == 4
    assert summary.total_submissions == 1
    assert summary.conversion_rate == 25.0
    assert summary.device_info == {"Mobile": 2, "Desktop": 2}
    assert summary.geo_locations == {"IN": 2, "Unknown": 2}
    assert summary.referrers == {"t.co": 2, "Direct": 2}


def test_estimated_views_stay_in_bounds():
    today = date(2024, 3, 10)
    created = date(2024, 3, 1)
    # 100 views over 10 live days => 10 per day before jitter
    estimates = estimated_daily_views(
        date(2024, 2, 25), date(2024, 3, 15), [(100, created)], today=today, rng=random.Random(7)
    )
    for day, value in estimates.items():
        if day < created or day > today:
            assert value == 0
        else:
            assert 8 <= value <= 12


def test_service_analytics_for_one_form(db, owner, make_form):
    form = make_form()
    today = datetime.utcnow().replace(hour=12, minute=0, second=0, microsecond=0)
    db.add_all([
        Submission(form_id=form.id, data={}, created_at=today),
        Submission(form_id=form.id, data={}, created_at=today - timedelta(days=1)),
        Submission(form_id=form.id, data={}, created_at=today - timedelta(days=90)),
        ViewRecord(form_id=form.id, timestamp=today, user_agent="iPhone"),
        ViewRecord(form_id=form.id, timestamp=today, user_agent="Windows"),
        ViewRecord(form_id=form.id, timestamp=today - timedelta(days=1), user_agent="Windows"),
        ViewRecord(form_id=form.id, timestamp=today - timedelta(days=1), user_agent="Windows"),
    ])
    db.commit()

    result = AnalyticsService.get_analytics(db, owner, form.id)
    assert result.form_id == form.id
    assert result.total_submissions == 2
    assert result.total_views == 4
    assert result.conversion_rate == 50.0
    assert result.end_date - result.start_date == timedelta(days=30)
    assert len(result.daily) == 31
    assert result.daily[-1].submissions == 1
    assert result.daily[-1].views == 2
    assert not any(p.views_estimated for p in result.daily)


def test_service_scopes_to_owner(db, owner, other_owner, make_form):
    mine = make_form(title="Mine")
    make_form(title="Theirs", user=other_owner)
    db.add(Submission(form_id=mine.id, data={}))
    db.commit()

    result = AnalyticsService.get_analytics(db, owner)
    assert result.form_id is None
    assert result.total_submissions == 1

    daily = AnalyticsService.get_daily(db, owner, start=date.today(), end=date.today() - timedelta(days=1))
    assert daily == []


def test_dashboard_stats(db, owner, make_form):
    published = make_form(title="Live")
    make_form(title="Draft", status=FormStatus.DRAFT)
    published.view_count = 7
    db.add(Submission(form_id=published.id, data={}))
    db.commit()

    stats = AnalyticsService.get_dashboard_stats(db, owner)
    assert stats.total_forms == 2
    assert stats.active_forms == 1
    assert stats.total_submissions == 1
    assert stats.total_views == 7
