"""Test helper utilities for DMP Award Scanner tests."""

from .fixture_adapter import FixtureAwardsAdapter, FixtureDMPHubAdapter, load_fixture_data

__all__ = ["FixtureAwardsAdapter", "FixtureDMPHubAdapter", "load_fixture_data"]
