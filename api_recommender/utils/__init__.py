"""
Utilities - logging, errors and text helpers
"""
