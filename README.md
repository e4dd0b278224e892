# lstorage

Typed building blocks for working with a decentralized durability engine
from Python:

- validated identifiers for content (`Cid`), peers (`PeerId`) and network
  addresses (`MultiAddress`);
- manifest and storage-space records parsed from a node's JSON replies,
  with helpers for sizes, quotas and fill levels;
- upload options, progress records and results;
- readers that wrap a file-like object and report upload progress, in
  blocking and `async` flavours;
- retrieval of the prebuilt native library for a target platform, with
  SHA-256 verification and a per-version local cache.

Install with `pip install .` (add `.[test]` for the test dependencies).

## What this package does not do

It does not run a storage node, connect to peers, or upload and download
content over the network. The node-facing parts here stop at parsing the
JSON and text that a node returns (`lstorage.storage_types`) and at
describing uploads (`lstorage.upload_types`, `lstorage.streaming`). There is
no command-line program.

## Identifiers (`lstorage.types`)

```python
from lstorage.types import Cid, PeerId, MultiAddress, CidError

cid = Cid.parse("zabc23def456")
print(str(cid))                      # zabc23def456

peer = PeerId.parse("12D3KooW")      # base58 only
addr = MultiAddress.parse("/ip4/127.0.0.1/tcp/1234")

try:
    Cid.parse("invalid")
except CidError as exc:
    print(exc)                       # Invalid CID format: CID must start with 'z'
```

A CID must start with `z` followed by base32 characters (letters of either
case, `2`–`7` and `=`); failures raise `CidFormatError` or
`CidEncodingError`, both subclasses of `CidError`. A peer ID must be
non-empty base58 (`PeerIdError` otherwise, see also `is_valid_base58`); a
multiaddress must start with `/` (`MultiAddrError` otherwise). All of these
errors are `ValueError`s. The constructors `Cid(value)` and so on wrap a
string without checking it.

## Manifests and storage space (`lstorage.storage_types`)

```python
from lstorage.storage_types import parse_manifest, parse_manifest_list, parse_space

manifest = parse_manifest(
    '{"treeCid": "zTree", "datasetSize": 2500, "blockSize": 1000,'
    ' "filename": "report.PDF", "mimetype": "application/pdf"}',
    "zabc23def456",
)
manifest.estimated_blocks()   # 3
manifest.file_extension()     # "pdf"
manifest.size_string()        # "2.4 KiB"

space = parse_space(
    '{"totalBlocks": 10, "quotaMaxBytes": 1000,'
    ' "quotaUsedBytes": 950, "quotaReservedBytes": 0}'
)
space.available_bytes()       # 50
space.is_nearly_full()        # True  (above 90 %)
space.is_critically_full()    # False (not above 95 %)
```

- `parse_manifest_list` reads a list of `{"cid": ..., "manifest": ...}`
  entries and returns `Manifest` objects with `cid` filled in.
- `parse_exists` accepts exactly `"true"` or `"false"`.
- `require_cid` raises `InvalidParameterError` for an empty CID.
- `format_size` renders byte counts with binary units (`B`, `KiB`, `MiB`, …).

`datasetSize`, `blockSize` and every `Space` field are required non-negative
integers; the string and boolean manifest fields default to empty/false.
Malformed replies raise `StorageDataError`. `Manifest.to_dict()` and
`Space.to_dict()` give back the JSON object form (the manifest's form
without its CID).

## Uploads and progress (`lstorage.upload_types`, `lstorage.streaming`)

```python
import io
from lstorage.upload_types import UploadOptions, UploadStrategy
from lstorage.streaming import StreamingUploadReader, create_streaming_reader

seen = []
options = UploadOptions(
    chunk_size=2048,
    strategy=UploadStrategy.CHUNKED,
    on_progress=lambda p: seen.append(p.bytes_uploaded),
)
options.validate()            # raises InvalidParameterError on a zero chunk size or timeout

reader = StreamingUploadReader(io.BytesIO(b"Hello, world!"), options, 13)
while reader.read(5):
    pass
print(seen)                   # [5, 10, 13]
print(reader.progress().percentage)  # 1.0
print(reader.chunk_count)     # 3
```

`UploadOptions` defaults to a 1 MiB chunk size, the `AUTO` strategy,
`verify=True` and a 300-second timeout. `UploadProgress.create` and
`UploadProgress.chunked` compute the completed fraction (capped at 1.0);
`with_percentage` returns a copy with it replaced. `UploadResult` holds the
CID, size, chunk count, duration and verification flag of a finished upload.

`create_streaming_reader(reader, options, total_size)` sets the chunk size to
one hundredth of `total_size`, kept between 64 KiB and 4 MiB.
`AsyncStreamingUploadReader` does the same counting for objects with an
awaitable `read(size)`.

## Prebuilt library retrieval

```python
from pathlib import Path
from lstorage.prebuilt import ensure_prebuilt_binary

lib_dir = ensure_prebuilt_binary(Path("build/native"), "x86_64-unknown-linux-gnu")
```

Supported targets come from `lstorage.targets.supported_targets()`;
`map_target_to_platform` gives the platform name used for release archives.
`ensure_prebuilt_binary` proceeds in this order:

1. `STORAGE_BINDINGS_LOCAL_LIBS` — if set to a directory holding at least one
   `.a` library and `libstorage.h`, its files are copied to the output
   directory (`lstorage.local.try_local_development_mode`). If that fails,
   retrieval falls through to the next steps.
2. The cache for the chosen release and platform, validated and re-checked
   against its `SHA256SUMS.txt`; a cache that fails the checksums is removed.
3. A download of the release asset whose name contains `linux-<platform>`,
   checked against the release's `SHA256SUMS.txt`, extracted, verified
   again, and saved to the cache (`lstorage.remote.download_from_github`).

An unsupported target or a missing asset raises `PrebuiltError`; a checksum
mismatch raises `ChecksumError`; HTTP failures raise `GitHubError` or
`DownloadError`.

The cache lives under `platformdirs.user_cache_dir()` in a
`storage-bindings` directory, laid out as `<version>/<platform>/`
(`lstorage.cache.version_cache_dir`). `clean_cache()` removes it.

Environment variables:

- `LOGOS_STORAGE_VERSION` — release tag to use; otherwise the latest release.
- `STORAGE_BINDINGS_FORCE_DOWNLOAD` — skip the cache (downloaded files are
  then not saved to it).
- `STORAGE_BINDINGS_CLEAN_CACHE` — reported by `cache.should_clean_cache()`;
  nothing clears the cache automatically, call `cache.clean_cache()`.

`lstorage.version.get_release_version(manifest_dir)` can also read a pinned
version from a `pyproject.toml` in `manifest_dir`:

```toml
[tool.lstorage.prebuilt]
libstorage = "v0.3.0"
```

The environment variable still takes precedence. The retrieval steps above
call it without a directory.

Checksum helpers live in `lstorage.checksum`: `calculate_sha256`,
`verify_archive_checksum`, `parse_checksums`, `parse_checksums_file` and
`verify_all_checksums`, which returns each file's status (`"verified"` or
`"skipped"`). Progress is reported through the standard `logging` module.