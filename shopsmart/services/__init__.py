"""
Store-facing operations over MongoDB.
"""
