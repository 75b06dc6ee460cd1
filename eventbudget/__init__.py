"""
EventBudget - Budget and Deadline Planner for Events.

Plans one or more events with a hierarchical budget (categories, line
items and optional sub-items), tracks payment and task deadlines, and
projects them onto a monthly calendar.

Version: 0.1.0
"""

__version__ = "0.1.0"
__author__ = "EventBudget Team"
