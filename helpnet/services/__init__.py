"""
Services.

Business logic layer.
"""
