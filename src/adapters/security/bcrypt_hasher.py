"""
bcrypt password hasher adapter - Implements PasswordHasher protocol.

bcrypt only accepts the first 72 bytes of a password. Depending on the
library version longer input is truncated or rejected, so the domain's
field rules refuse such passwords before they get here.
"""

import bcrypt


class BcryptPasswordHasher:
    """
    Implements PasswordHasher protocol via bcrypt.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, cost: int = 10) -> None:
        """
        Args:
            cost: bcrypt work factor (log2 rounds, minimum 10)
        """
        if cost < 10:
            raise ValueError(f"bcrypt cost factor must be at least 10, got {cost}")
        self._cost = cost

    def hash(self, password: str) -> str:
        return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=self._cost)).decode()
