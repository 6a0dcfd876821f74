"""Capability evaluators backing the permission gate."""

import os
from abc import ABC, abstractmethod
from typing import Iterable

GRANTED_CAPABILITIES_ENV = "EMAIL_GRANTED_CAPABILITIES"


class CapabilityEvaluator(ABC):
    """Interface to the platform's permission evaluation."""

    @abstractmethod
    def evaluate(self, name: str) -> bool:
        """Check whether the current user holds a named capability.

        Args:
            name: Capability name (e.g. "Allow_Email_Download")

        Returns:
            True if the capability is granted
        """
        pass


class StaticCapabilityEvaluator(CapabilityEvaluator):
    """Grants a fixed set of capability names."""

    def __init__(self, granted: Iterable[str] = ()) -> None:
        self._granted = frozenset(granted)

    def evaluate(self, name: str) -> bool:
        return name in self._granted


class EnvCapabilityEvaluator(CapabilityEvaluator):
    """Reads granted capabilities from EMAIL_GRANTED_CAPABILITIES.

    The variable holds a comma-separated list of capability names.
    It is read on every evaluation; caching is the gate's job.
    """

    def __init__(self, env_var: str = GRANTED_CAPABILITIES_ENV) -> None:
        self._env_var = env_var

    def evaluate(self, name: str) -> bool:
        raw = os.environ.get(self._env_var, "")
        granted = {item.strip() for item in raw.split(",") if item.strip()}
        return name in granted
