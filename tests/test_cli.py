import pytest

from mlkem.cli import DEMO_D, DEMO_M, DEMO_Z, main
from mlkem.kem import ML_KEM_512, ML_KEM_768, encaps, keygen


def _field(output: str, label: str) -> str:
    prefix = f"{label}: "
    for line in output.splitlines():
        if line.startswith(prefix):
            return line[len(prefix) :]
    raise AssertionError(f"no line labelled {label!r}")


def test_default_run_matches_library(capsys):
    assert main([]) == 0
    out = capsys.readouterr().out
    ek, dk = keygen(ML_KEM_512, DEMO_D, DEMO_Z)
    key, c = encaps(ek, ML_KEM_512, DEMO_M)
    assert _field(out, "parameter set") == "ML-KEM-512"
    assert _field(out, "ek (first 32 bytes)") == ek[:32].hex().upper()
    assert _field(out, "dk (first 32 bytes)") == dk[:32].hex().upper()
    assert _field(out, "message") == DEMO_M.hex().upper()
    assert _field(out, "shared key (encaps)") == key.hex().upper()
    assert _field(out, "ciphertext (first 32 bytes)") == c[:32].hex().upper()


def test_shared_keys_agree(capsys):
    assert main(["--parameter-set", "768"]) == 0
    out = capsys.readouterr().out
    assert _field(out, "parameter set") == ML_KEM_768.name
    assert _field(out, "shared key (encaps)") == _field(out, "shared key (decaps)")


def test_random_run_agrees(capsys):
    assert main(["--random"]) == 0
    out = capsys.readouterr().out
    assert _field(out, "shared key (encaps)") == _field(out, "shared key (decaps)")
    assert _field(out, "message") != DEMO_M.hex().upper()


def test_timings_are_reported(capsys):
    assert main([]) == 0
    out = capsys.readouterr().out
    assert float(_field(out, "total time (ms)")) >= 0.0


def test_unknown_parameter_set_exits():
    with pytest.raises(SystemExit) as excinfo:
        main(["--parameter-set", "256"])
    assert excinfo.value.code == 2