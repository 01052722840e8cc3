"""ML-KEM key encapsulation, its polynomial arithmetic, and the SHA-3 family it uses."""

__version__ = "0.1.0"
__all__ = ["keccak", "hashes", "randombytes", "poly", "kem", "cli"]