import pytest

from lstorage.local import LOCAL_LIBS_ENV_VAR, PrebuiltError
from lstorage.prebuilt import ensure_prebuilt_binary


def test_local_libraries_take_precedence(monkeypatch, tmp_path):
    libs = tmp_path / "libs"
    libs.mkdir()
    (libs / "libstorage.a").write_bytes(b"lib")
    (libs / "libstorage.h").write_text("void g(void);\n")
    out = tmp_path / "out"
    out.mkdir()
    monkeypatch.setenv(LOCAL_LIBS_ENV_VAR, str(libs))
    result = ensure_prebuilt_binary(out, "riscv64-unknown-linux-gnu")
    assert result == out
    assert (out / "libstorage.a").read_bytes() == b"lib"


def test_falls_back_to_remote_when_local_unset(monkeypatch, tmp_path):
    monkeypatch.delenv(LOCAL_LIBS_ENV_VAR, raising=False)
    with pytest.raises(PrebuiltError, match="Unsupported target"):
        ensure_prebuilt_binary(tmp_path, "riscv64-unknown-linux-gnu")


def test_falls_back_to_remote_when_local_path_missing(monkeypatch, tmp_path):
    monkeypatch.setenv(LOCAL_LIBS_ENV_VAR, str(tmp_path / "missing"))
    with pytest.raises(PrebuiltError, match="Unsupported target"):
        ensure_prebuilt_binary(tmp_path, "sparc-unknown-none")