"""
Captcha verification.

The session stores only a digest of the challenge text. Submitted tokens
are digested the same way and compared in constant time.
"""

import hashlib
import secrets


def challenge_digest(value: str) -> str:
    """Digest used both to store a challenge and to check a submission."""
    return hashlib.sha256(value.encode()).hexdigest()


class CaptchaChecker:
    """Checks a submitted captcha against the session challenge."""

    def verify(self, submitted_token: str | None, challenge: str | None) -> bool:
        if not submitted_token or not challenge:
            return False
        return secrets.compare_digest(challenge_digest(submitted_token).encode(), challenge.encode())
