"""Permission gate for email download and forwarding.

Public API:
    - PermissionGate: Cached, single-flight capability checks
    - Capability: Named capabilities
    - PermissionDecision: Resolved check outcome
    - CapabilityEvaluator: Interface to the platform's permission check
    - StaticCapabilityEvaluator, EnvCapabilityEvaluator: Implementations
"""

from .evaluator import (
    GRANTED_CAPABILITIES_ENV,
    CapabilityEvaluator,
    EnvCapabilityEvaluator,
    StaticCapabilityEvaluator,
)
from .gate import PermissionGate
from .models import Capability, PermissionDecision

__all__ = [
    "PermissionGate",
    "Capability",
    "PermissionDecision",
    "CapabilityEvaluator",
    "StaticCapabilityEvaluator",
    "EnvCapabilityEvaluator",
    "GRANTED_CAPABILITIES_ENV",
]
