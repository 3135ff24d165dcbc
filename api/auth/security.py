"""
Auth security helpers.
"""

from __future__ import annotations

import secrets


def _equal(left: str, right: str) -> bool:
    return secrets.compare_digest(left.encode("utf-8"), right.encode("utf-8"))


def credentials_match(
    *,
    username: str,
    password: str,
    expected_username: str,
    expected_password: str,
) -> bool:
    # Both comparisons always run so timing does not reveal which one failed.
    user_ok = _equal(username, expected_username)
    password_ok = _equal(password, expected_password)
    return user_ok and password_ok
