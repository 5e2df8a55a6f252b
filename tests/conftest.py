# tests/conftest.py
from __future__ import annotations

"""
Pytest configuration for the xiuchart suite.

- Registers Hypothesis profiles for local dev and CI.
- Points the app at the repo's config file regardless of the working directory.
- Sanity-checks ERFA availability (used as an independent calendar oracle).
"""

import os
from pathlib import Path

import pytest
from hypothesis import settings, HealthCheck

REPO_ROOT = Path(__file__).resolve().parent.parent
os.environ.setdefault("XIU_CONFIG", str(REPO_ROOT / "config" / "defaults.yaml"))


# ──────────────────────────────────────────────────────────────────────────────
# Hypothesis profiles
# ──────────────────────────────────────────────────────────────────────────────
settings.register_profile(
    "dev",
    settings(
        deadline=None,           # avoid flaky timeouts on slower runners
        max_examples=60,         # fast local runs
        suppress_health_check=[HealthCheck.too_slow],
    ),
)
settings.register_profile(
    "ci",
    settings(
        deadline=None,
        max_examples=200,
        suppress_health_check=[HealthCheck.too_slow],
    ),
)

_profile = (
    "ci"
    if (os.getenv("CI") or os.getenv("GITHUB_ACTIONS"))
    else os.getenv("HYPOTHESIS_PROFILE", "dev")
)
settings.load_profile(_profile)


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "slow: mark test as slow")


def pytest_report_header(config: pytest.Config) -> str:
    return f"Hypothesis profile: '{_profile}'"


# ──────────────────────────────────────────────────────────────────────────────
# Global fixtures
# ──────────────────────────────────────────────────────────────────────────────

@pytest.fixture(scope="session")
def ensure_erfa():
    """
    Fail early if ERFA/pyERFA isn't importable or missing the calendar functions.
    """
    import erfa  # pyERFA exposes the ERFA namespace as 'erfa'
    assert hasattr(erfa, "cal2jd"), "ERFA.cal2jd not available"
    assert hasattr(erfa, "jd2cal"), "ERFA.jd2cal not available"
    return erfa


@pytest.fixture()
def client():
    from xiuchart.main import app
    app.testing = True
    return app.test_client()
