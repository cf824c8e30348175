"""
Backend package for FreelanceOS.

This package provides a FastAPI application for the project, note and
bill workspace, together with the scheduled demo-data reset used by the
public demo account.
"""
