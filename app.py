"""
Entry point for hosts that launch ``streamlit run app.py``.

Honeybees Daycare starts on the staff login page, which lives in Welcome.py.
Importing it runs that page in this script's context.
"""

import os
import sys

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

import Welcome  # noqa: F401,E402
