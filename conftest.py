"""Pytest configuration applied to the entire test suite."""

from __future__ import annotations


# Load the BDD step definition modules before feature parsing so pytest-bdd
# can match scenario text to the registered steps.
pytest_plugins = [
    "tests.e2e.steps.install_steps",
]
