"""
Per-scan duplicate suppression keyed by (normalized value, source resource).
"""


class Deduplicator:
    """
    Remembers every (value, source) pair seen during one scan.

    The first sighting wins: later matches for the same pair, even from a
    different pattern, are discarded. A fresh instance is created per scan.
    """

    def __init__(self):
        self._seen = set()

    @staticmethod
    def key(value: str, source_file: str) -> str:
        return f"{value}|{source_file}"

    def seen(self, value: str, source_file: str) -> bool:
        return self.key(value, source_file) in self._seen

    def check_and_add(self, value: str, source_file: str) -> bool:
        """Record the pair; True if this is its first sighting."""
        k = self.key(value, source_file)
        if k in self._seen:
            return False
        self._seen.add(k)
        return True

    def __len__(self):
        return len(self._seen)
