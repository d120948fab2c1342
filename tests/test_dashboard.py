"""Smoke tests for the Streamlit dashboard, driven through ``AppTest``."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest
from streamlit.testing.v1 import AppTest

APP_PATH = Path(__file__).resolve().parent.parent / "src" / "fee_estimator" / "dashboard" / "app.py"


@pytest.fixture
def app() -> AppTest:
    return AppTest.from_file(str(APP_PATH), default_timeout=60).run()


def test_renders(app: AppTest):
    assert not app.exception
    assert any(t.value == "Payment Fee Estimator" for t in app.title)


@pytest.mark.parametrize("feature", ["terminal", "billing", "instant_payouts"])
def test_toggle_emits_event(app: AppTest, feature: str, caplog):
    with caplog.at_level(logging.INFO, logger="fee_estimator.sinks"):
        app.checkbox(key=f"feature_{feature}").check().run()
    assert not app.exception
    assert "feature_toggle" in caplog.text
    assert f"'feature': '{feature}'" in caplog.text
    assert "'enabled': True" in caplog.text


def test_untouched_checkbox_is_silent(app: AppTest, caplog):
    with caplog.at_level(logging.INFO, logger="fee_estimator.sinks"):
        app.run()
    assert "feature_toggle" not in caplog.text
