"""
Generic read-only endpoints over catalog tables.
"""
