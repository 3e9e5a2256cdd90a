"""Test helpers for FamilyFlow tests.

This module re-exports helpers for convenient imports:

    from tests.helpers import SetupResult, setup_from_yaml, setup_scenario

See individual modules for full documentation:
- setup.py: Declarative store setup from scenario dicts or YAML files
"""

from tests.helpers.setup import SetupResult, setup_from_yaml, setup_scenario

__all__ = ["SetupResult", "setup_from_yaml", "setup_scenario"]
