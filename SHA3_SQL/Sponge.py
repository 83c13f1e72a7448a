from .GLOBAL import *
from .Keccak import AbsorbInto, LoadByte, StoreByte


class SpongeState:
    """
    The 1600-bit Keccak state together with the sponge rate and the number
    of bytes absorbed since the last permutation.

    Invariant between calls: 0 <= nLoaded < rate.
    """

    def __init__(self, rate_bytes: int):
        if rate_bytes <= 0 or rate_bytes >= STATE_BYTES or rate_bytes % 8 != 0:
            raise ValueError(f"Invalid sponge rate: {rate_bytes} bytes.")
        self.lanes = np.zeros(LANE_COUNT, dtype=np.uint64)
        self.rate = rate_bytes
        self.nLoaded = 0

    def LoadByte(self, i: int) -> int:
        """Return byte i (0..199) of the state."""
        return int(LoadByte(self.lanes, i))

    def StoreByte(self, i: int, v: int):
        """Overwrite byte i (0..199) of the state with v."""
        StoreByte(self.lanes, i, v)

    def Absorb(self, data):
        """
        XOR 'data' into the state at the current position, permuting every
        time a full block of 'rate' bytes has been loaded.

        Args:
            data: bytes-like input of any length, including zero.
        """
        if isinstance(data, (bytearray, memoryview)):
            data = bytes(data)
        elif not isinstance(data, bytes):
            raise TypeError(f"Expected a bytes-like object, got {type(data).__name__}.")
        if not data:
            return
        buf = np.frombuffer(data, dtype=np.uint8)
        self.nLoaded = AbsorbInto(self.lanes, self.rate, self.nLoaded, buf)

    def Squeeze(self) -> bytes:
        """Return a copy of the first 'rate' bytes of the state."""
        if BYTE_ORDER == "little":
            raw = self.lanes.tobytes()
        else:
            raw = self.lanes.astype(LANE_DTYPE).tobytes()
        return raw[:self.rate]
