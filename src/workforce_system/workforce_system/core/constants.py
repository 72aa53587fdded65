"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_MINIMUM_VALID_HOURS = 6
DEFAULT_DAILY_HOURS = 8

SESSION_KEY_PREFIX = "auth."

AUTO_REJECT_BREAK_NOTE = "Automatically rejected: Break request expired (not approved before start time)"
HR_ASSIGNED_BREAK_NOTE = "Break assigned directly by HR"
