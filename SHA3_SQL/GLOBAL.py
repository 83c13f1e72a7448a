# REF: https://nvlpubs.nist.gov/nistpubs/FIPS/NIST.FIPS.202.pdf

import sys
import numpy as np

# SHA3-224    -  rate 1152 bits
# SHA3-256    -  rate 1088 bits
# SHA3-384    -  rate  832 bits
# SHA3-512    -  rate  576 bits

SUPPORTED_SIZES = (224, 256, 384, 512)
DEFAULT_SIZE    = 256

# r = (1600 - 2 * d) / 8 bytes
RATE_BYTES = {size: (1600 - 2 * size) // 8 for size in SUPPORTED_SIZES}

STATE_BYTES = 200
LANE_COUNT  = 25
ROUNDS      = 24

SIZE_ERROR_MSG = "SHA3 size should be one of: 224 256 384 512"


# Hash backends
LIB_HASH    = 0
MY_HASH     = 1

HASH_MODE   = MY_HASH


# Lanes are little-endian 64-bit words (FIPS 202, 3.1.2).
LANE_DTYPE = np.dtype("<u8")
BYTE_ORDER = sys.byteorder


"""
    --- Keccak-f[1600] tables ---

    ROUND_CONSTANTS[i]      RC for round i, XORed into lane (0, 0) by iota
    RHO_OFFSETS[5*y + x]    left rotation of lane (x, y) by rho
"""
ROUND_CONSTANTS = np.array([
    0x0000000000000001, 0x0000000000008082, 0x800000000000808a, 0x8000000080008000,
    0x000000000000808b, 0x0000000080000001, 0x8000000080008081, 0x8000000000008009,
    0x000000000000008a, 0x0000000000000088, 0x0000000080008009, 0x000000008000000a,
    0x000000008000808b, 0x800000000000008b, 0x8000000000008089, 0x8000000000008003,
    0x8000000000008002, 0x8000000000000080, 0x000000000000800a, 0x800000008000000a,
    0x8000000080008081, 0x8000000000008080, 0x0000000080000001, 0x8000000080008008,
], dtype=np.uint64)

RHO_OFFSETS = np.array([
     0,  1, 62, 28, 27,
    36, 44,  6, 55, 20,
     3, 10, 43, 25, 39,
    41, 45, 15, 21,  8,
    18,  2, 61, 56, 14,
], dtype=np.uint64)


# Known-answer vectors shipped next to this module
KAT_FILENAME = "KAT_SHA3.txt"
