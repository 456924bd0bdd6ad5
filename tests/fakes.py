"""Test doubles for the vault and merchant client."""

from typing import List, Optional, Tuple

from ticketchecker.credentials.interfaces import AccessPolicy, AuthPolicy
from ticketchecker.errors import Result
from ticketchecker.merchants.transport import Endpoint


class FakeAuthenticator:
    """Scripted device authenticator that records every challenge."""

    def __init__(
        self,
        available: bool = True,
        success: bool = True,
        message: Optional[str] = None,
        raises: Optional[Exception] = None,
    ):
        self.available = available
        self.success = success
        self.message = message
        self.raises = raises
        self.can_evaluate_calls: List[AuthPolicy] = []
        self.evaluate_calls: List[Tuple[AuthPolicy, str]] = []

    def can_evaluate(self, policy: AuthPolicy) -> bool:
        self.can_evaluate_calls.append(policy)
        return self.available

    async def evaluate(self, policy: AuthPolicy, reason: str):
        self.evaluate_calls.append((policy, reason))
        if self.raises is not None:
            raise self.raises
        return self.success, self.message


class RecordingTransport:
    """HttpClient fake that returns a canned result and records requests."""

    def __init__(self, result: Result):
        self.result = result
        self.calls: List[Endpoint] = []

    async def request(self, endpoint: Endpoint) -> Result:
        self.calls.append(endpoint)
        return self.result




class BrokenStore:
    """SecureStore whose every call raises."""

    def __init__(self, exc: Exception):
        self.exc = exc

    def write(self, service: str, account: str, access_policy: AccessPolicy, data: bytes) -> bool:
        raise self.exc

    def delete(self, service: str, account: str) -> bool:
        raise self.exc

    def read(self, service: str, account: str) -> Optional[bytes]:
        raise self.exc
