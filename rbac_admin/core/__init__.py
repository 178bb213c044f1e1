"""Core configuration, logging, security and the policy engine."""
