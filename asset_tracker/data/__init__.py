"""
Data layer - SQLAlchemy models for the Asset Tracker
"""
