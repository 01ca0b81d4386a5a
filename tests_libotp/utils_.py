from __future__ import annotations

#: RFC 4226 appendix D / RFC 6238 appendix B key
RFC_KEY = b"12345678901234567890"
RFC_KEY_BASE32 = "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"
RFC_KEY_BASE64 = "MTIzNDU2Nzg5MDEyMzQ1Njc4OTA="


class FakeClock:
    """clock which replays fixed times, and counts how often it was read"""

    def __init__(self, *times: float) -> None:
        self._times = list(times)
        self.reads = 0

    def __call__(self) -> float:
        index = min(self.reads, len(self._times) - 1)
        self.reads += 1
        return self._times[index]


def exploding_clock() -> float:
    raise AssertionError("clock should not have been read")
