# =============================================================================
# daycare_core/__init__.py
# Core package for the Honeybees Daycare operations app
# =============================================================================
"""
daycare_core - data layer, daily-log lifecycle and report dispatch for the
Honeybees Daycare app.

Subpackages:
    offline   Local store, cloud mirror, merge policy, facade, realtime channel
    services  Lifecycle rules, report dispatch, admin login, AI summary
    reports   Email rendering and trend analytics
    logging   Centralized logging configuration
    errors    Exception hierarchy and UI error helpers
"""

__version__ = "1.0.0"
