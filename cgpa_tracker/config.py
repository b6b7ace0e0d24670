"""
Runtime configuration.

Values come from environment variables where a deployment may want to
override them; the grading limits are fixed.
"""

import os

# Persisted state
DATA_FILE = os.environ.get("CGPA_DATA_FILE", "cgpa_tracker_data.json")

# Grading
DEFAULT_PRESET_ID = os.environ.get("CGPA_DEFAULT_PRESET", "ugc")
MIN_CREDIT = 0.5
MAX_CREDIT = 6.0
MAX_GRADE_POINT = 4.0

# Logging
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
LOG_FORMAT = os.environ.get("LOG_FORMAT", "text")  # "text" or "json"
