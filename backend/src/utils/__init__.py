"""
Utility modules for the clinic scheduling backend.

This package contains shared utility functions and helpers used across
the application, such as clinic-timezone datetime handling.
"""

from utils.datetime_utils import clinic_now, day_of_week_sunday_first, parse_date_string

__all__ = ['clinic_now', 'day_of_week_sunday_first', 'parse_date_string']
