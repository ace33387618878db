import hashlib


class ConsistentHashing:
    def __init__(self, m: int) -> None:
        if m < 1:
            raise ValueError(f"identifier length must be positive, got {m}")
        self.BITS_COUNT = m
        self.MAX = 2 ** m

    def hash(self, key: str) -> int:
        return int(hashlib.md5(key.encode()).hexdigest(), base=16) % self.MAX

    def __call__(self, key: str) -> int:
        return self.hash(key)
