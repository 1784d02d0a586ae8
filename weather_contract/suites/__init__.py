"""
Scenario Suites

Each suite module registers the cases for one upstream API contract.
This isolation keeps adding or removing a suite a single-file operation.

To add a new suite:
1. Create suites/newapi.py with a register_newapi_cases(registry, config) function
2. Re-export it here and wire it into cli.py
"""

from .openweather import create_openweather_registry, register_openweather_cases

__all__ = [
    "create_openweather_registry",
    "register_openweather_cases",
]
