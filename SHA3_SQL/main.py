import os
import sqlite3
import time
from pathlib import Path

from .GLOBAL import *
from .CryptoFunc import NewHasher, Sha3Digest
from .SHA3_SQL import Sha3Query
from .SQLFunc import RegisterFunctions


def parse_kat_file(filepath):
    """
    Parses a key-value file and stores values with the same key into lists.
    Values are converted from hex strings to bytes.

    Args:
        filepath (str): The path to the file to be parsed.

    Returns:
        dict: A dictionary where keys are the variable names (e.g., 'Msg', 'MD256')
              and values are lists of the corresponding bytes values found in the file.
    """
    data = {}
    with open(filepath, 'r') as f:
        for line in f:
            # Ensure the line contains an equals sign before splitting
            if '=' not in line or line.lstrip().startswith('#'):
                continue
            key, value = line.split('=', 1)
            key = key.strip()
            try:
                value_bytes = bytes.fromhex(value.strip())
            except ValueError:
                print(f"Warning: Could not decode hex value for key '{key}'. Skipping.")
                continue
            data.setdefault(key, []).append(value_bytes)
    return data


def default_kat_path():
    return Path(__file__).resolve().parent / KAT_FILENAME


def TC_KAT(parsed_data: dict, mode: int = MY_HASH):
    messages = parsed_data.get('Msg', [])
    for size in SUPPORTED_SIZES:
        expected = parsed_data.get(f'MD{size}', [])
        for msg, md in zip(messages, expected):
            assert Sha3Digest(msg, size, mode) == md
    print(f"✅SHA3 passed all {len(messages)} known-answer messages at every size!")


def TC_CrossCheck_randomData(n: int = 100):
    for i in range(n):
        msg = os.urandom(i * 7)
        size = SUPPORTED_SIZES[i % len(SUPPORTED_SIZES)]
        assert Sha3Digest(msg, size, MY_HASH) == Sha3Digest(msg, size, LIB_HASH)
    print(f"✅SHA3 matched pycryptodome on all {n} random messages!")


def TC_Query():
    conn = sqlite3.connect(":memory:")
    RegisterFunctions(conn)
    conn.execute("CREATE TABLE t(a, b)")
    conn.executemany("INSERT INTO t VALUES (?, ?)", [(1, 'one'), (2.5, b'\x00\x01'), (None, 'x')])
    direct = Sha3Query(conn, "SELECT * FROM t ORDER BY rowid;")
    via_sql = conn.execute("SELECT sha3_query('SELECT * FROM t ORDER BY rowid;')").fetchone()[0]
    conn.close()
    assert direct == via_sql
    print(f"✅sha3_query(): {direct.hex()}")


def run_Benchmark(n: int, size: int = DEFAULT_SIZE, length: int = 1 << 16):
    # Skip first time run to avoid numba compilation time
    Sha3Digest(b'', size, MY_HASH)

    msg = os.urandom(length)
    my_total_elapsed = 0.0
    lib_total_elapsed = 0.0

    for i in range(n):
        start = time.perf_counter()
        hasher = NewHasher(size, MY_HASH)
        hasher.update(msg)
        hasher.digest()
        end = time.perf_counter()
        round_elapsed = end - start
        my_total_elapsed += round_elapsed

        start = time.perf_counter()
        Sha3Digest(msg, size, LIB_HASH)
        end = time.perf_counter()
        lib_total_elapsed += end - start

        print(f"Round {i+1}: SHA3-{size} over {length} bytes took {round_elapsed*1000:.6f} ms to execute.")

    print(f"SHA3-{size} took averagely {my_total_elapsed / n * 1000:.6f} ms to execute.")
    print(f"pycryptodome SHA3-{size} took averagely {lib_total_elapsed / n * 1000:.6f} ms to execute.")


if __name__ == "__main__":
    start_time = time.perf_counter()
    TC_KAT(parse_kat_file(default_kat_path()))
    first_run_elapsed = time.perf_counter() - start_time
    # The first run includes numba compilation
    print(f"The code took {first_run_elapsed:.4f} seconds to execute for the first time.")

    TC_CrossCheck_randomData()
    TC_Query()
    run_Benchmark(n=10)
