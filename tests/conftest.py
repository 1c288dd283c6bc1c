import os
import sys

import pytest

# Make scripts/ importable without installing the project
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "scripts")))

import generate_default_icon as icon  # noqa: E402


@pytest.fixture
def no_symbol(monkeypatch):
    """Pretend the sparkles symbol is missing on this host."""
    monkeypatch.setattr(icon, "load_symbol", lambda *args, **kwargs: None)


@pytest.fixture
def no_gradient(monkeypatch):
    """Pretend the gradient can't be constructed."""
    monkeypatch.setattr(icon, "make_gradient", lambda *args, **kwargs: None)
