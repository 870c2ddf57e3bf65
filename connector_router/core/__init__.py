"""
Core configuration, error types and wire-format definitions
"""
