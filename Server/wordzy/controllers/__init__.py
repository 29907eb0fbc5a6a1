"""
Controllers Package

Flask blueprints for the HTTP bootstrap endpoints.
"""
