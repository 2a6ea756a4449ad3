from .api_groups import APIGroups
from .environments import Environment

__all__ = ["APIGroups", "Environment"]
