"""
Shared pytest fixtures for itchain tests.

This module provides the sample subjects used across test modules and
resets the trace logger so logging tests cannot leak handlers.
"""

import pytest

from itchain import configure_trace_logging


class Messenger:
    """Subject with methods and boolean flags, used for invoke/receiver tests."""

    t = True
    f = False

    def get_context(self, *args):
        return self

    def get_args(self, *args):
        return list(args)


def collect(*args):
    return list(args)


@pytest.fixture(autouse=True)
def reset_trace_logger(monkeypatch):
    """
    Give every test a silent trace logger.

    ITCHAIN_DEBUG_LOG / ITCHAIN_LOG_FILE from the developer's shell are
    removed first so the default configuration is predictable.
    """
    monkeypatch.delenv("ITCHAIN_DEBUG_LOG", raising=False)
    monkeypatch.delenv("ITCHAIN_LOG_FILE", raising=False)
    configure_trace_logging()
    yield
    monkeypatch.delenv("ITCHAIN_DEBUG_LOG", raising=False)
    monkeypatch.delenv("ITCHAIN_LOG_FILE", raising=False)
    configure_trace_logging()


@pytest.fixture
def nested():
    return {"a": 1, "b": {"c": 2}}


@pytest.fixture
def messenger():
    return Messenger()


@pytest.fixture
def address_book():
    """
    Create a small address book; one entry has no last name.
    """
    return [
        {"first": "Sifwa", "last": "Duhav", "phone": "(416) 984-4454"},
        {"first": "Moc", "last": None, "phone": "(898) 983-5755"},
        {"first": "Diblacbo", "last": "Li", "phone": "(258) 838-8314"},
        {"first": "Betu", "last": "Jol", "phone": "(219) 234-9591"},
        {"first": "Fuhetu", "last": "Ra", "phone": "(631) 437-2332"},
    ]
