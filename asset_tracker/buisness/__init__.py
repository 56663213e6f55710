"""
Business layer - lifecycle managers and invariant enforcement
"""
