"""
Authentication, request validation and serialization helpers.
"""
