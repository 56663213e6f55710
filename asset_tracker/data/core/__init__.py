"""
Core data models: users, assets, licenses, license assignments and activities
"""
