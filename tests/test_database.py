"""Tests for session helpers, the unit of work and logging setup."""

from decimal import Decimal

import pytest
import structlog

import database
from logging_config import configure_logging, get_logger
from models import Debtor


@pytest.fixture
def bound_sessions(monkeypatch, session_factory):
    monkeypatch.setattr(database, "SessionLocal", session_factory)
    return session_factory


def _debtor_count(session_factory) -> int:
    session = session_factory()
    try:
        return session.query(Debtor).count()
    finally:
        session.close()


def test_session_context_commits_on_success(bound_sessions):
    with database.get_session_context() as db:
        db.add(Debtor(customer_id=11, debtor_type="Individual", balance=Decimal("5.00")))

    assert _debtor_count(bound_sessions) == 1


def test_session_context_rolls_back_on_error(bound_sessions):
    with pytest.raises(RuntimeError):
        with database.get_session_context() as db:
            db.add(Debtor(customer_id=11, debtor_type="Individual", balance=Decimal("5.00")))
            db.flush()
            raise RuntimeError("boom")

    assert _debtor_count(bound_sessions) == 0


def test_session_dependency_commits_and_closes(bound_sessions):
    dependency = database.get_session()
    db = next(dependency)
    db.add(Debtor(customer_id=12, debtor_type="Corporate", balance=Decimal("0.00")))

    with pytest.raises(StopIteration):
        next(dependency)

    assert _debtor_count(bound_sessions) == 1


def test_unit_of_work_rolls_back_and_reraises(db):
    with pytest.raises(ValueError):
        with database.unit_of_work(db):
            db.add(Debtor(customer_id=13, debtor_type="Individual", balance=Decimal("1.00")))
            db.flush()
            raise ValueError("invalid")

    assert db.query(Debtor).count() == 0


def test_database_url_prefers_explicit_setting(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite:///./other.db")

    assert database.build_database_url() == "sqlite:///./other.db"


@pytest.mark.parametrize(
    "environment, renderer",
    [
        ("development", structlog.dev.ConsoleRenderer),
        ("production", structlog.processors.JSONRenderer),
    ],
)
def test_configure_logging_picks_renderer_by_environment(monkeypatch, environment, renderer):
    monkeypatch.setenv("APP_ENV", environment)

    try:
        configure_logging()
        assert isinstance(structlog.get_config()["processors"][-1], renderer)
        get_logger("billing.test").info("logging_configured", environment=environment)
    finally:
        structlog.reset_defaults()
