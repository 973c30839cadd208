"""
Workflow controllers for Infantino screens.

- Review Editor: compose, validate and submit a review
- Review List: load stored reviews and the restaurant profile
"""
