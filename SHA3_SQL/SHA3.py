from .GLOBAL import *
from .Errors import InvalidSizeError
from .Sponge import SpongeState

##
## =================================================================
## 'Crypto.Hash'-style API CLASSES
## =================================================================
##

# pad10*1 with the SHA3 domain bits "01" (FIPS 202, Table 6)
PAD_SINGLE  = b'\x86'
PAD_FIRST   = b'\x06'
PAD_LAST    = b'\x80'


def CheckSize(size):
    """Raises InvalidSizeError unless size is one of the supported bit sizes."""
    # bool is an int subclass, True is not a digest size
    if isinstance(size, bool) or not isinstance(size, int) or size not in SUPPORTED_SIZES:
        raise InvalidSizeError(size)


class SHA3:
    """
    Incremental SHA3 hash object.

    Args:
        size: Digest size in bits, one of 224, 256, 384, 512.
        data: Optional first chunk of the message.
    """

    def __init__(self, size: int = DEFAULT_SIZE, data=None):
        CheckSize(size)
        self.size = size
        self.digest_size = size // 8
        self._sponge = SpongeState(RATE_BYTES[size])
        self._digest_cache = None

        if data is not None:
            self.update(data)

    @property
    def rate(self) -> int:
        return self._sponge.rate

    def update(self, data):
        """Update the hash object with a bytestring."""
        if self._digest_cache is not None:
            raise TypeError("update() called after digest()")
        self._sponge.Absorb(data)
        return self

    def _pad(self):
        sponge = self._sponge
        if sponge.nLoaded == sponge.rate - 1:
            # Both pad bits land in the last free byte
            sponge.Absorb(PAD_SINGLE)
        else:
            sponge.Absorb(PAD_FIRST)
            sponge.nLoaded = sponge.rate - 1
            sponge.Absorb(PAD_LAST)

    def digest(self) -> bytes:
        """Return the digest as a bytes object."""
        # Fixed hashes always return the same value
        if self._digest_cache is not None:
            return self._digest_cache

        self._pad()
        self._digest_cache = self._sponge.Squeeze()[:self.digest_size]
        return self._digest_cache

    def hexdigest(self) -> str:
        """Return the digest as a hex-encoded string."""
        return self.digest().hex()

    @classmethod
    def new(cls, data=None, size: int = DEFAULT_SIZE):
        """Return a new SHA3 hash object."""
        return cls(size, data)


##
## =================================================================
## PUBLIC API CLASSES (SHA3)
## =================================================================
##

class SHA3_224(SHA3):
    """SHA3-224 hash object."""
    def __init__(self, data=None):
        # c = 448, r = 1600 - 448 = 1152 bits = 144 bytes
        super().__init__(224, data)

    @classmethod
    def new(cls, data=None):
        """Return a new SHA3-224 hash object."""
        return cls(data)

class SHA3_256(SHA3):
    """SHA3-256 hash object."""
    def __init__(self, data=None):
        # c = 512, r = 1600 - 512 = 1088 bits = 136 bytes
        super().__init__(256, data)

    @classmethod
    def new(cls, data=None):
        """Return a new SHA3-256 hash object."""
        return cls(data)

class SHA3_384(SHA3):
    """SHA3-384 hash object."""
    def __init__(self, data=None):
        # c = 768, r = 1600 - 768 = 832 bits = 104 bytes
        super().__init__(384, data)

    @classmethod
    def new(cls, data=None):
        """Return a new SHA3-384 hash object."""
        return cls(data)

class SHA3_512(SHA3):
    """SHA3-512 hash object."""
    def __init__(self, data=None):
        # c = 1024, r = 1600 - 1024 = 576 bits = 72 bytes
        super().__init__(512, data)

    @classmethod
    def new(cls, data=None):
        """Return a new SHA3-512 hash object."""
        return cls(data)
