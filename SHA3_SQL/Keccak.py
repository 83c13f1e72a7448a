from .GLOBAL import *
from numba import jit

##
## =================================================================
## KECCAK-f[1600] PERMUTATION
## State is a numpy uint64[25] array, lane (x, y) at index 5*y + x.
## =================================================================
##

@jit(nopython=True, cache=True)
def ROTL64(a, n):
    """Rotate the 64-bit lane 'a' left by 'n' bits (n is uint64)."""
    if n == 0:
        return a
    return (a << n) | (a >> (np.uint64(64) - n))


@jit(nopython=True, cache=True)
def Theta(A):
    """ Algorithm 1: theta"""
    C = np.zeros(5, dtype=np.uint64)

    # Step 1: column parities
    for x in range(5):
        C[x] = A[x] ^ A[x + 5] ^ A[x + 10] ^ A[x + 15] ^ A[x + 20]

    # Step 2-3
    for x in range(5):
        D = C[(x + 4) % 5] ^ ROTL64(C[(x + 1) % 5], np.uint64(1))
        for y in range(5):
            A[5 * y + x] ^= D


@jit(nopython=True, cache=True)
def RhoPi(A, B):
    """ Algorithms 2 and 3: rho and pi, fused.

    Lane (x, y) is rotated by its rho offset and lands at (y, 2x + 3y mod 5).
    """
    for y in range(5):
        for x in range(5):
            B[5 * ((2 * x + 3 * y) % 5) + y] = ROTL64(A[5 * y + x], RHO_OFFSETS[5 * y + x])


@jit(nopython=True, cache=True)
def Chi(A, B):
    """ Algorithm 4: chi"""
    for y in range(5):
        for x in range(5):
            A[5 * y + x] = B[5 * y + x] ^ (
                (~B[5 * y + (x + 1) % 5]) & B[5 * y + (x + 2) % 5]
            )


@jit(nopython=True, cache=True)
def Iota(A, i_r):
    """ Algorithm 6: iota"""
    A[0] ^= ROUND_CONSTANTS[i_r]


@jit(nopython=True, cache=True)
def KeccakF1600(A):
    """ Algorithm 7: KECCAK-p[1600, 24], in place on the lane array."""
    B = np.zeros(25, dtype=np.uint64)
    for i_r in range(24):
        Theta(A)
        RhoPi(A, B)
        Chi(A, B)
        Iota(A, i_r)


##
## =================================================================
## BYTE ACCESS
## Byte i of the 200-byte state is bits 8*(i%8) .. 8*(i%8)+7 of lane i//8,
## whatever the byte order of the host.
## =================================================================
##

@jit(nopython=True, cache=True)
def LoadByte(A, i):
    return (A[i >> 3] >> np.uint64(8 * (i & 7))) & np.uint64(0xFF)


@jit(nopython=True, cache=True)
def StoreByte(A, i, v):
    shift = np.uint64(8 * (i & 7))
    keep = ~(np.uint64(0xFF) << shift)
    A[i >> 3] = (A[i >> 3] & keep) | ((np.uint64(v) & np.uint64(0xFF)) << shift)


@jit(nopython=True, cache=True)
def AbsorbInto(A, rate, nLoaded, data):
    """
    XOR the uint8 array 'data' into the state starting at byte 'nLoaded',
    running the permutation each time 'rate' bytes are loaded.

    Returns:
        The new number of bytes loaded since the last permutation.
    """
    n = data.shape[0]
    i = 0

    # Whole words while the state offset is lane-aligned
    if nLoaded % 8 == 0:
        while i + 7 < n:
            word = np.uint64(0)
            for j in range(8):
                word |= np.uint64(data[i + j]) << np.uint64(8 * j)
            A[nLoaded >> 3] ^= word
            nLoaded += 8
            i += 8
            if nLoaded >= rate:
                KeccakF1600(A)
                nLoaded = 0

    while i < n:
        StoreByte(A, nLoaded, LoadByte(A, nLoaded) ^ np.uint64(data[i]))
        nLoaded += 1
        i += 1
        if nLoaded == rate:
            KeccakF1600(A)
            nLoaded = 0

    return nLoaded
