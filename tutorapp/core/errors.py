from __future__ import annotations


class TutorError(Exception):
    """Base for failures that end a single tutor turn."""

    reason = "error"


class CredentialMissing(TutorError):
    reason = "credential_missing"


class TransportFailure(TutorError):
    """Network or provider-side failure. `reason` is the coarse classification."""

    def __init__(self, message: str, reason: str = "error") -> None:
        super().__init__(message)
        self.reason = reason
