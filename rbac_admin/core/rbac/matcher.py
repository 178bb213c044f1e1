"""
Pattern matching for policy tuples.

Matching rules:
- role must be equal
- resource is either exact, or a pattern ending in "*" that matches any
  request path starting with the text before the "*"
- action is either exact or "*"

Comparison is case-sensitive. "/api/*" matches "/api/" and everything
below it, but not "/api" itself.

A pattern is malformed when any field is empty, when "*" appears in a
resource anywhere but the last character, or when an action contains "*"
without being exactly "*". Malformed patterns are never evaluated.
"""

from dataclasses import dataclass

from .interfaces import PolicyTuple


WILDCARD = "*"


@dataclass(frozen=True, slots=True)
class CompiledRule:
    """A well-formed policy tuple prepared for matching."""
    resource: str
    action: str
    prefix: str | None = None

    def matches(self, resource: str, action: str) -> bool:
        if self.action != WILDCARD and self.action != action:
            return False
        if self.prefix is None:
            return self.resource == resource
        return resource.startswith(self.prefix)


def find_malformation(policy: PolicyTuple) -> str | None:
    """Describe what is wrong with a policy tuple, or None if it is usable."""
    for name in ("role", "resource", "action"):
        value = getattr(policy, name)
        if not isinstance(value, str) or not value:
            return f"empty {name}"

    if WILDCARD in policy.resource[:-1]:
        return f"wildcard not at end of resource pattern {policy.resource!r}"

    if WILDCARD in policy.action and policy.action != WILDCARD:
        return f"partial wildcard in action {policy.action!r}"

    return None


def compile_rule(policy: PolicyTuple) -> CompiledRule:
    """
    Compile a well-formed tuple.

    Raises:
        ValueError: If the tuple is malformed
    """
    problem = find_malformation(policy)
    if problem:
        raise ValueError(problem)

    if policy.resource.endswith(WILDCARD):
        return CompiledRule(policy.resource, policy.action, prefix=policy.resource[:-1])
    return CompiledRule(policy.resource, policy.action)


def matches(policy: PolicyTuple, role: str, resource: str, action: str) -> bool:
    """One-off match of a single tuple against a request."""
    if policy.role != role:
        return False
    return compile_rule(policy).matches(resource, action)
