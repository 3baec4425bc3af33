import itertools
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.core.config import settings
from app.core.errors import CodeSpaceExhausted
from app.db import repository
from app.db.Models.models import Base, Click, QRStyle
from app.schemas.QRStyle import QRStyleUpdate
from app.services.Analytics import Analytics


def test_create_link_with_default_style(db_session):
    link = repository.create_link(db_session, "https://example.com", "Example", "desc")
    assert len(link.short_code) == 6
    assert link.click_count == 0
    assert link.is_active is True
    assert link.qr_type is None
    style = link.qr_style
    assert (style.foreground_color, style.background_color) == ("#000000", "#ffffff")
    assert style.size == 200
    assert style.error_correction_level == "M"
    assert style.logo_url is None


def test_create_qr_payload_record(db_session):
    wifi = repository.create_qr_payload_record(db_session, "wifi", "WIFI:T:WPA;S:a;P:b;H:false;;")
    url = repository.create_qr_payload_record(db_session, "url", "https://example.com")
    assert wifi.original_url == ""
    assert wifi.qr_content.startswith("WIFI:")
    assert url.original_url == "https://example.com"
    repository.create_link(db_session, "https://plain.example.com")

    records = repository.list_qr_payload_records(db_session)
    assert {r.id for r in records} == {wifi.id, url.id}


def test_collision_is_retried(db_session, monkeypatch):
    first = repository.create_link(db_session, "https://example.com/1")
    codes = iter([first.short_code, first.short_code, "Zz9Yy8"])
    monkeypatch.setattr(repository, "generate_short_code", lambda: next(codes))

    second = repository.create_link(db_session, "https://example.com/2")
    assert second.short_code == "Zz9Yy8"
    assert repository.count_links(db_session) == 2


def test_code_space_exhausted(db_session, monkeypatch):
    first = repository.create_link(db_session, "https://example.com/1")
    monkeypatch.setattr(repository, "generate_short_code", lambda: first.short_code)

    with pytest.raises(CodeSpaceExhausted):
        repository.create_link(db_session, "https://example.com/2")
    assert repository.count_links(db_session) == 1


def test_concurrent_creation_never_shares_a_code(tmp_path, monkeypatch):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'race.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    Base.metadata.create_all(bind=engine)
    Session = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    workers = 8
    counter = itertools.count()
    lock = threading.Lock()

    def colliding_codes():
        # Every worker's early draws hit the same code
        with lock:
            n = next(counter)
        return "AAAAAA" if n < workers else f"B{n:05d}"

    monkeypatch.setattr(repository, "generate_short_code", colliding_codes)
    monkeypatch.setattr(settings, "SHORT_CODE_MAX_ATTEMPTS", workers + 2)

    def create(i):
        db = Session()
        try:
            return repository.create_link(db, f"https://example.com/{i}").short_code
        finally:
            db.close()

    with ThreadPoolExecutor(max_workers=workers) as pool:
        codes = list(pool.map(create, range(workers)))

    assert len(set(codes)) == workers
    assert codes.count("AAAAAA") == 1
    engine.dispose()


def test_update_link_url(db_session):
    link = repository.create_link(db_session, "https://example.com/old")
    updated = repository.update_link_url(db_session, link.id, "https://example.com/new")
    assert updated.original_url == "https://example.com/new"
    assert repository.update_link_url(db_session, 9999, "https://x.com") is None


def test_update_qr_style_keeps_unset_fields_and_replaces_logo(db_session):
    link = repository.create_link(db_session, "https://example.com")
    repository.update_qr_style(db_session, link.id, QRStyleUpdate(
        foreground_color="#ff0000", size=300, logo_url="https://cdn.example.com/logo.png", logo_size=60,
    ))
    style = repository.update_qr_style(db_session, link.id, QRStyleUpdate(error_correction_level="H"))

    assert style.foreground_color == "#ff0000"
    assert style.size == 300
    assert style.error_correction_level == "H"
    assert style.logo_url is None
    assert style.logo_size is None
    assert repository.update_qr_style(db_session, 9999, QRStyleUpdate()) is None


def test_delete_link_removes_style_and_clicks(db_session):
    link = repository.create_link(db_session, "https://example.com")
    repository.record_click(db_session, link.id, "ua", "ref", "1.2.3.4")
    assert repository.delete_link(db_session, link.id) is True

    assert repository.get_link_by_id(db_session, link.id) is None
    assert db_session.query(QRStyle).count() == 0
    assert db_session.query(Click).count() == 0
    assert repository.delete_link(db_session, link.id) is False


def test_increment_click_count(db_session):
    link = repository.create_link(db_session, "https://example.com")
    for _ in range(3):
        repository.increment_click_count(db_session, link.id)
    db_session.refresh(link)
    assert link.click_count == 3


def test_analytics_summary(db_session):
    popular = repository.create_link(db_session, "https://example.com/a", title="Popular")
    quiet = repository.create_link(db_session, "https://example.com/b")
    for _ in range(2):
        repository.increment_click_count(db_session, popular.id)
        repository.record_click(db_session, popular.id, "Mozilla/5.0", None, "10.0.0.1")

    summary = Analytics.summary(db_session)
    assert summary.total_links == 2
    assert summary.total_clicks == 2
    assert [t.id for t in summary.top_links] == [popular.id, quiet.id]
    assert summary.top_links[1].title == "Untitled Link"
    assert sum(day.clicks for day in summary.clicks_over_time) == 2
    assert len(summary.recent_clicks) == 2
    assert summary.recent_clicks[0].referrer == "Direct"
    assert summary.recent_clicks[0].user_agent == "Mozilla/5.0"
