"""
Optional basic-auth gate.
"""
