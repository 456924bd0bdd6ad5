"""Bundled :class:`~ticketchecker.credentials.interfaces.DeviceAuthenticator` implementations."""

import inspect
import logging
from typing import Awaitable, Callable, Optional, Tuple, Union

from ticketchecker.credentials.crypto import verify_passcode
from ticketchecker.credentials.interfaces import AuthPolicy

logger = logging.getLogger(__name__)

# Receives the reason string, returns the entered passcode or None on cancel.
PasscodePrompt = Callable[[str], Union[Optional[str], Awaitable[Optional[str]]]]


class PasscodeAuthenticator:
    """Device-passcode challenge checked against a PBKDF2 hash.

    Biometrics are not available here, so only
    ``AuthPolicy.DEVICE_OWNER_AUTHENTICATION`` (which falls back to the
    passcode) can be evaluated.
    """

    SUPPORTED_POLICIES = frozenset({AuthPolicy.DEVICE_OWNER_AUTHENTICATION})

    def __init__(
        self,
        passcode_hash: Optional[str],
        prompt: PasscodePrompt,
        max_attempts: int = 3,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._passcode_hash = passcode_hash
        self._prompt = prompt
        self.max_attempts = max_attempts

    def can_evaluate(self, policy: AuthPolicy) -> bool:
        return bool(self._passcode_hash) and policy in self.SUPPORTED_POLICIES

    async def _ask(self, reason: str) -> Optional[str]:
        answer = self._prompt(reason)
        if inspect.isawaitable(answer):
            answer = await answer
        return answer

    async def evaluate(
        self, policy: AuthPolicy, reason: str
    ) -> Tuple[bool, Optional[str]]:
        if not self.can_evaluate(policy):
            return False, "Authentication policy not available on this device"

        for attempt in range(1, self.max_attempts + 1):
            entered = await self._ask(reason)
            if entered is None:
                logger.info("Passcode authentication cancelled by user")
                return False, "Authentication cancelled by user"
            if verify_passcode(entered, self._passcode_hash):
                return True, None
            logger.info(
                "Passcode authentication attempt %d/%d failed",
                attempt,
                self.max_attempts,
            )
        return False, "Too many failed passcode attempts"


class UnavailableAuthenticator:
    """A device with no evaluable authentication policy."""

    def can_evaluate(self, policy: AuthPolicy) -> bool:
        return False

    async def evaluate(
        self, policy: AuthPolicy, reason: str
    ) -> Tuple[bool, Optional[str]]:
        return False, "Authentication policy not available on this device"
