"""
Reporting for Infantino.

Rating summaries and CSV exports of stored reviews.
"""
