"""Shared fixtures for the CDK unit tests."""

from pathlib import Path

import pytest
from aws_cdk import App, Stack

HANDLER_NAMES = ["ListGoals", "CreateGoal", "DeleteGoal", "UpdateGoal", "GetGoal"]


@pytest.fixture
def stack() -> Stack:
    """Create a test stack."""
    app = App()
    return Stack(app, "TestStack")


@pytest.fixture
def functions_dir(tmp_path: Path) -> str:
    """Directory with placeholder handler files for Code.from_asset."""
    directory = tmp_path / "functions"
    directory.mkdir()
    for name in HANDLER_NAMES:
        (directory / f"{name}.js").write_text("exports.handler = async () => ({ statusCode: 200 });\n")
    return str(directory)
