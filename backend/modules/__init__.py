"""
Business logic and service modules
"""
