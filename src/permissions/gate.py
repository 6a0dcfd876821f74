"""Session-scoped permission gate with single-flight checks."""

import asyncio
import logging
from typing import Optional

from src.errors import PermissionDeniedError

from .evaluator import CapabilityEvaluator
from .models import Capability, PermissionDecision

logger = logging.getLogger(__name__)


class PermissionGate:
    """Resolves and caches capability checks for one UI session.

    Each capability is evaluated at most once per gate. Callers that ask
    while a check is in flight await the same task instead of starting a
    new evaluation. A failed evaluation resolves to a denied decision
    carrying the failure reason. Create a new gate for a new session.

    Example:
        gate = PermissionGate(EnvCapabilityEvaluator())
        if await gate.check(Capability.DOWNLOAD):
            ...
    """

    def __init__(self, evaluator: CapabilityEvaluator):
        self._evaluator = evaluator
        self._pending: dict[Capability, asyncio.Task] = {}

    async def _evaluate(self, capability: Capability) -> PermissionDecision:
        try:
            granted = await asyncio.to_thread(self._evaluator.evaluate, capability.value)
        except Exception as e:
            logger.exception("Permission check for %s failed", capability.value)
            return PermissionDecision(capability, granted=False, error=str(e) or type(e).__name__)
        logger.info("Permission %s resolved: granted=%s", capability.value, bool(granted))
        return PermissionDecision(capability, granted=bool(granted))

    async def resolve(self, capability: Capability) -> PermissionDecision:
        """Return the decision for a capability, evaluating it once."""
        task = self._pending.get(capability)
        if task is None:
            task = asyncio.ensure_future(self._evaluate(capability))
            self._pending[capability] = task
        elif task.done():
            return task.result()
        return await asyncio.shield(task)

    async def check(self, capability: Capability) -> bool:
        """Check whether a capability is granted.

        Returns:
            True if granted, False if denied.

        Raises:
            PermissionDeniedError: If the check itself could not be resolved.
        """
        decision = await self.resolve(capability)
        if decision.failed:
            raise PermissionDeniedError(
                capability.value, action=capability.action, detail=decision.error
            )
        return decision.granted

    async def require(self, capability: Capability) -> None:
        """Raise PermissionDeniedError unless the capability is granted."""
        if not await self.check(capability):
            raise PermissionDeniedError(capability.value, action=capability.action)

    def decision(self, capability: Capability) -> Optional[PermissionDecision]:
        """Return the cached decision, or None if not resolved yet."""
        task = self._pending.get(capability)
        if task is None or not task.done():
            return None
        return task.result()
