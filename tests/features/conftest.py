"""Fixtures for feature tests."""

from pathlib import Path

import pytest


@pytest.fixture
def widget_source(qx_project: Path) -> str:
    return (qx_project / "source" / "class" / "my" / "Widget.js").read_text()


@pytest.fixture
def base_source(qx_project: Path) -> str:
    return (qx_project / "source" / "class" / "my" / "Base.js").read_text()


@pytest.fixture
def other_widget_source(qx_project: Path) -> str:
    return (qx_project / "source" / "class" / "my" / "OtherWidget.js").read_text()
