"""Command-line demonstration of ML-KEM key generation, encapsulation and decapsulation."""

from __future__ import annotations

import argparse
import sys
import time
from typing import Sequence

from .kem import ML_KEM_512, ML_KEM_768, ML_KEM_1024, MLKEMError, decaps, encaps, keygen
from .randombytes import randombytes

__all__ = ["DEMO_D", "DEMO_Z", "DEMO_M", "main"]

DEMO_D = bytes.fromhex(
    "d69cfc64f84d4f33e4c54e166b7ff9283a394986a539b23987a10f39d2d9689b"
)
DEMO_Z = bytes.fromhex(
    "6de62e3465a55c9c78a07d265be8540b3e58b0801a124d07ff12b438d5202ea0"
)
DEMO_M = bytes.fromhex(
    "0121cb32acd1871135cb34e29c1a0e26ccc001b939eafaacc28f13f1938dbf91"
)

_PARAMETER_SETS = {"512": ML_KEM_512, "768": ML_KEM_768, "1024": ML_KEM_1024}
_RULE = "-" * 78


def _hex(data: bytes) -> str:
    return data[:32].hex().upper()


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mlkem",
        description="Run ML-KEM key generation, encapsulation and decapsulation.",
    )
    parser.add_argument(
        "-p",
        "--parameter-set",
        choices=sorted(_PARAMETER_SETS, key=int),
        default="512",
        help="security level (default: 512)",
    )
    parser.add_argument(
        "--random",
        action="store_true",
        help="draw seeds and message from the OS instead of the fixed demo values",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the three ML-KEM operations, printing keys, outputs and timings."""
    args = _parser().parse_args(argv)
    params = _PARAMETER_SETS[args.parameter_set]
    if args.random:
        d, z, m = randombytes(32), randombytes(32), randombytes(32)
    else:
        d, z, m = DEMO_D, DEMO_Z, DEMO_M

    print(f"parameter set: {params.name}")
    try:
        start = time.perf_counter()
        ek, dk = keygen(params, d, z)
        keygen_ms = (time.perf_counter() - start) * 1000
        print(f"ek (first 32 bytes): {_hex(ek)}")
        print(f"dk (first 32 bytes): {_hex(dk)}")
        print(f"key generation time (ms): {keygen_ms:f}")
        print(_RULE)

        start = time.perf_counter()
        key, c = encaps(ek, params, m)
        encaps_ms = (time.perf_counter() - start) * 1000
        print(f"message: {_hex(m)}")
        print(f"shared key (encaps): {_hex(key)}")
        print(f"ciphertext (first 32 bytes): {_hex(c)}")
        print(f"encapsulation time (ms): {encaps_ms:f}")
        print(_RULE)

        start = time.perf_counter()
        key_decaps = decaps(dk, c, params)
        decaps_ms = (time.perf_counter() - start) * 1000
    except MLKEMError as error:
        print(f"error: {error}", file=sys.stderr)
        return 1
    print(f"shared key (decaps): {_hex(key_decaps)}")
    print(f"decapsulation time (ms): {decaps_ms:f}")
    print(_RULE)
    print(f"total time (ms): {keygen_ms + encaps_ms + decaps_ms:f}")
    return 0


if __name__ == "__main__":
    sys.exit(main())