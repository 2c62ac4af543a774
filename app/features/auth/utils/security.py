from typing import Optional

from passlib.hash import argon2


class PasswordHasher:
    def __init__(self, rounds: int = 3, memory_cost: int = 65536, parallelism: int = 4):
        self._argon2 = argon2.using(rounds=rounds, memory_cost=memory_cost, parallelism=parallelism)

    def hash(self, secret: str) -> str:
        return self._argon2.hash(secret)

    def verify(self, secret: str, hashed: Optional[str]) -> bool:
        if not hashed:
            return False
        try:
            return argon2.verify(secret, hashed)
        except ValueError:
            # not an argon2 digest
            return False
