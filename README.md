# mlkem

A pure-Python implementation of the ML-KEM key encapsulation mechanism
(FIPS 203). It also has the Keccak-based hash functions that ML-KEM uses:
SHA3-256, SHA3-384, SHA3-512, SHAKE128 and SHAKE256.

The package has no runtime dependencies. It is meant for study,
experiments and testing, not for speed. It makes no claim to run in
constant time.

## Installation

```
pip install .
```

## Key encapsulation

```python
from mlkem import kem

params = kem.ML_KEM_512

ek, dk = kem.keygen(params)
shared_key, ciphertext = kem.encaps(ek, params)
assert kem.decaps(dk, ciphertext, params) == shared_key
```

Three parameter sets are defined in `mlkem.kem`: `ML_KEM_512` (the
default everywhere), `ML_KEM_768` and `ML_KEM_1024`. `PARAMETER_SETS`
maps their names (`"ML-KEM-512"` and so on) to them. A `ParameterSet`
gives its expected sizes through `encapsulation_key_size()`,
`decapsulation_key_size()` and `ciphertext_size()`.

The seeds `d` and `z` to `keygen` and the message `m` to `encaps` are
optional. Leave them out and they are drawn from the operating system's
random source (`mlkem.randombytes.randombytes`). Pass 32-byte values to
get results you can repeat. The deterministic building blocks
`keygen_internal`, `encaps_internal` and `decaps_internal` are public as
well, and so are the K-PKE routines `kpke_keygen`, `kpke_encrypt` and
`kpke_decrypt`.

Input checks raise `kem.MLKEMError`, a subclass of `ValueError`:

- `encaps` rejects an encapsulation key of the wrong length or one whose
  encoded coefficients are not below q = 3329;
- `decaps` rejects a decapsulation key or ciphertext of the wrong length,
  and a decapsulation key whose stored hash of the encapsulation key does
  not match;
- the internal and K-PKE functions reject seeds, messages, keys and
  ciphertexts of the wrong length.

A ciphertext that passes these checks but was not produced for the key
is not an error: `decaps` returns the implicit-rejection key instead.

## Hashes and XOFs

```python
from mlkem import hashes

hashes.sha3_256(b"abc")            # 32-byte digest
hashes.shake128(b"seed", 64)       # 64 bytes of XOF output

h = hashes.Sha3_512()
h.update(b"part one, ")
h.update(b"part two")
digest = h.digest()
```

`Sha3_256`, `Sha3_384` and `Sha3_512` have `update`, `digest`,
`hexdigest`, `copy` and a `block_size` property; `digest` does not end
the hash, so further updates continue from the same state.

`Shake128` and `Shake256` are incremental sponges:

```python
xof = hashes.Shake256(b"first part")
xof.absorb(b"second part")
xof.finalize()
out = xof.squeeze(100) + xof.squeeze(20)
```

They also offer `squeeze_blocks(count)` for whole rate-sized blocks and
`copy()`. Absorbing after `finalize`, or squeezing before it, raises
`RuntimeError`. The underlying `Sponge` class and the Keccak-f[1600]
permutation `keccak_f1600` live in `mlkem.keccak`.

## Polynomial arithmetic

`mlkem.poly` holds the ring operations modulo q = 3329 on polynomials of
256 coefficients: `ntt` and `ntt_inverse`, `multiply_ntts` and
`base_case_multiply`, `sum_poly`, `compress` and `decompress`,
`byte_encode` and `byte_decode`, `bits_to_bytes` and `bytes_to_bits`,
and the samplers `sample_ntt`, `generate_matrix`, `sample_poly_cbd` and
`prf`.

## Command line

```
mlkem
```

This runs key generation, encapsulation and decapsulation one after
another with fixed demonstration seeds and message. It prints the first
32 bytes of the keys and ciphertext, the shared keys from both sides and
how long each step took in milliseconds.

Options:

- `-p`, `--parameter-set {512,768,1024}`: the security level (default 512);
- `--random`: draw the seeds and message from the operating system
  instead of using the fixed values.

The command exits with status 1 and a message on standard error if an
input check fails.