from . import GLOBAL
from .GLOBAL import LIB_HASH, MY_HASH
from Crypto.Hash import SHA3_224, SHA3_256, SHA3_384, SHA3_512
from .SHA3 import (
    CheckSize,
    SHA3_224 as my_SHA3_224,
    SHA3_256 as my_SHA3_256,
    SHA3_384 as my_SHA3_384,
    SHA3_512 as my_SHA3_512
)

LIB_CLASSES = {224: SHA3_224, 256: SHA3_256, 384: SHA3_384, 512: SHA3_512}
MY_CLASSES  = {224: my_SHA3_224, 256: my_SHA3_256, 384: my_SHA3_384, 512: my_SHA3_512}


def NewHasher(size: int, mode: int = None):
    """
    Returns a fresh incremental SHA3 object with update() and digest().

    Args:
        size: Digest size in bits, one of 224, 256, 384, 512.
        mode: LIB_HASH (pycryptodome) or MY_HASH (this package).
              Defaults to GLOBAL.HASH_MODE.

    Raises:
        InvalidSizeError: If the size is not supported.
    """
    CheckSize(size)
    if mode is None:
        mode = GLOBAL.HASH_MODE

    if mode == LIB_HASH:
        return LIB_CLASSES[size].new()
    elif mode == MY_HASH:
        return MY_CLASSES[size].new()
    else:
        raise Exception("Please choose Hash Library")


def Sha3Digest(data: bytes, size: int = 256, mode: int = None) -> bytes:
    """
    Implements the one-shot hash SHA3-size(data).

    Returns:
        A (size / 8)-byte digest.
    """
    hasher = NewHasher(size, mode)
    hasher.update(data)
    return hasher.digest()
