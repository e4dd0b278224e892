import pytest

from lstorage.checksum import (
    CHECKSUMS_FILE,
    ChecksumError,
    calculate_sha256,
    parse_checksums,
    parse_checksums_file,
    verify_all_checksums,
    verify_archive_checksum,
)

EMPTY_SHA256 = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"


def test_sha256_of_empty_file(tmp_path):
    path = tmp_path / "empty.bin"
    path.write_bytes(b"")
    assert calculate_sha256(path) == EMPTY_SHA256


def test_sha256_is_stable_across_buffer_boundaries(tmp_path):
    data = bytes(range(256)) * 100
    first = tmp_path / "a.bin"
    second = tmp_path / "b.bin"
    first.write_bytes(data)
    second.write_bytes(data)
    digest = calculate_sha256(first)
    assert digest == calculate_sha256(second)
    assert len(digest) == 64
    assert all(ch in "0123456789abcdef" for ch in digest)


def test_sha256_differs_for_different_content(tmp_path):
    first = tmp_path / "a.bin"
    second = tmp_path / "b.bin"
    first.write_bytes(b"one")
    second.write_bytes(b"two")
    assert calculate_sha256(first) != calculate_sha256(second)


def test_verify_archive_checksum_accepts_match(tmp_path):
    archive = tmp_path / "linux-amd64.tar.gz"
    archive.write_bytes(b"archive body")
    expected = calculate_sha256(archive)
    assert verify_archive_checksum(archive, expected) == expected


def test_verify_archive_checksum_rejects_mismatch(tmp_path):
    archive = tmp_path / "linux-amd64.tar.gz"
    archive.write_bytes(b"")
    with pytest.raises(ChecksumError, match="Archive checksum mismatch") as info:
        verify_archive_checksum(archive, "00" * 32)
    assert EMPTY_SHA256 in str(info.value)


def test_parse_checksums_skips_comments_and_bad_lines():
    text = "# header\n\nabc123  libstorage.a\nbroken\n  def456 libstorage.h  \n"
    assert parse_checksums(text) == {"libstorage.a": "abc123", "libstorage.h": "def456"}


def test_parse_checksums_file(tmp_path):
    path = tmp_path / CHECKSUMS_FILE
    path.write_text("abc123 one.a\ndef456 two.a\n")
    assert parse_checksums_file(path) == {"one.a": "abc123", "two.a": "def456"}


def test_verify_all_without_checksums_file(tmp_path):
    (tmp_path / "libstorage.a").write_bytes(b"lib")
    assert verify_all_checksums(tmp_path) == {}


def test_verify_all_with_empty_checksums_file(tmp_path):
    (tmp_path / "libstorage.a").write_bytes(b"lib")
    (tmp_path / CHECKSUMS_FILE).write_text("# nothing\n")
    assert verify_all_checksums(tmp_path) == {}


def test_verify_all_reports_verified_and_skipped(tmp_path):
    lib = tmp_path / "libstorage.a"
    header = tmp_path / "libstorage.h"
    lib.write_bytes(b"lib")
    header.write_bytes(b"header")
    (tmp_path / "extra.txt").write_bytes(b"extra")
    (tmp_path / "sub").mkdir()
    (tmp_path / CHECKSUMS_FILE).write_text(
        f"{calculate_sha256(lib)}  libstorage.a\n{calculate_sha256(header)}  libstorage.h\n"
    )
    assert verify_all_checksums(tmp_path) == {
        "extra.txt": "skipped",
        "libstorage.a": "verified",
        "libstorage.h": "verified",
    }


def test_verify_all_fails_on_tampered_file(tmp_path):
    lib = tmp_path / "libstorage.a"
    lib.write_bytes(b"lib")
    (tmp_path / CHECKSUMS_FILE).write_text(f"{calculate_sha256(lib)}  libstorage.a\n")
    lib.write_bytes(b"tampered")
    with pytest.raises(ChecksumError, match="1 files failed checksum verification"):
        verify_all_checksums(tmp_path)