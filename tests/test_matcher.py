"""
Tests for policy pattern matching.
"""

import pytest

from rbac_admin.core.rbac import PolicyTuple, find_malformation, matches


@pytest.mark.parametrize(
    "pattern,path,expected",
    [
        ("/api/users", "/api/users", True),
        ("/api/users", "/api/users/1", False),
        ("/api/users/*", "/api/users/1", True),
        ("/api/users/*", "/api/users/1/roles", True),
        ("/api/users/*", "/api/users/", True),
        ("/api/users/*", "/api/users", False),
        ("/api/*", "/api/roles", True),
        ("/api/*", "/apiary", False),
        ("*", "/anything", True),
        ("/api/Users", "/api/users", False),
    ],
)
def test_resource_matching(pattern, path, expected):
    policy = PolicyTuple("r", pattern, "GET")
    assert matches(policy, "r", path, "GET") is expected


def test_action_wildcard_matches_any_method():
    policy = PolicyTuple("admin", "/api/*", "*")
    for method in ("GET", "POST", "PUT", "DELETE", "PATCH"):
        assert matches(policy, "admin", "/api/roles", method)


def test_action_is_case_sensitive():
    policy = PolicyTuple("user", "/api/users", "GET")
    assert not matches(policy, "user", "/api/users", "get")


def test_role_must_be_equal():
    policy = PolicyTuple("admin", "/api/*", "*")
    assert not matches(policy, "Admin", "/api/roles", "GET")
    assert not matches(policy, "user", "/api/roles", "GET")


@pytest.mark.parametrize(
    "policy",
    [
        PolicyTuple("", "/api/users", "GET"),
        PolicyTuple("user", "", "GET"),
        PolicyTuple("user", "/api/users", ""),
        PolicyTuple("user", "/api/*/users", "GET"),
        PolicyTuple("user", "**", "GET"),
        PolicyTuple("user", "/api/users", "G*"),
    ],
)
def test_malformed_patterns_are_detected(policy):
    assert find_malformation(policy) is not None


@pytest.mark.parametrize(
    "policy",
    [
        PolicyTuple("user", "/api/users", "GET"),
        PolicyTuple("user", "/api/users/*", "PUT"),
        PolicyTuple("admin", "/api/*", "*"),
        PolicyTuple("root", "*", "*"),
    ],
)
def test_well_formed_patterns(policy):
    assert find_malformation(policy) is None
