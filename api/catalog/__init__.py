"""
Schema catalog: discovery of user tables and their columns.
"""
