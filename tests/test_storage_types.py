import json

import pytest

from lstorage.storage_types import (
    Manifest,
    Space,
    StorageDataError,
    format_size,
    parse_exists,
    parse_manifest,
    parse_manifest_list,
    parse_space,
    require_cid,
)
from lstorage.types import InvalidParameterError


def _manifest_json(**overrides):
    data = {
        "treeCid": "zTree",
        "datasetSize": 5000,
        "blockSize": 1024,
        "filename": "Report.PDF",
        "mimetype": "application/pdf",
        "protected": True,
    }
    data.update(overrides)
    return data


def test_format_size_small_and_units():
    assert format_size(512) == "512 B"
    assert format_size(1024) == "1.0 KiB"
    assert format_size(1024 * 1024) == "1.0 MiB"


def test_require_cid():
    assert require_cid("zabc") == "zabc"
    with pytest.raises(InvalidParameterError) as info:
        require_cid("")
    assert info.value.parameter == "cid"
    assert info.value.message == "CID cannot be empty"


def test_manifest_round_trip():
    data = _manifest_json()
    manifest = Manifest.from_dict(data)
    assert manifest.cid == ""
    assert manifest.to_dict() == data


def test_manifest_defaults_for_optional_fields():
    manifest = Manifest.from_dict({"datasetSize": 10, "blockSize": 2})
    assert manifest == Manifest(dataset_size=10, block_size=2)


def test_manifest_missing_required_field():
    with pytest.raises(StorageDataError, match="datasetSize"):
        Manifest.from_dict({"blockSize": 2})


def test_manifest_rejects_negative_size():
    with pytest.raises(StorageDataError):
        Manifest.from_dict({"datasetSize": -1, "blockSize": 2})


def test_estimated_blocks_invariant():
    for dataset, block in [(5000, 1024), (4096, 1024), (1, 7), (0, 3)]:
        blocks = Manifest(dataset_size=dataset, block_size=block).estimated_blocks()
        assert blocks * block >= dataset
        assert max(blocks - 1, 0) * block < dataset or dataset == 0


def test_estimated_blocks_zero_block_size():
    assert Manifest(dataset_size=100, block_size=0).estimated_blocks() == 0


def test_file_and_directory():
    named = Manifest(filename="a.txt", dataset_size=3)
    unnamed = Manifest(dataset_size=3)
    empty = Manifest()
    assert named.is_file() and not named.is_directory()
    assert unnamed.is_directory() and not unnamed.is_file()
    assert not empty.is_directory()


def test_file_extension():
    assert Manifest(filename="Report.PDF").file_extension() == "pdf"
    assert Manifest(filename="archive.tar.GZ").file_extension() == "gz"
    assert Manifest(filename="README").file_extension() is None
    assert Manifest().file_extension() is None


def test_size_string_matches_format_size():
    manifest = Manifest(dataset_size=5000)
    assert manifest.size_string() == format_size(5000)


def test_parse_manifest_sets_cid():
    manifest = parse_manifest(json.dumps(_manifest_json()), "zabc")
    assert manifest.cid == "zabc"
    assert manifest.tree_cid == "zTree"
    assert manifest.protected is True


def test_parse_manifest_invalid_json():
    with pytest.raises(StorageDataError, match="Failed to parse manifest"):
        parse_manifest("not json", "zabc")


def test_parse_manifest_list():
    payload = [
        {"cid": "zone", "manifest": _manifest_json(filename="one.txt")},
        {"cid": "ztwo", "manifest": _manifest_json(filename="two.txt")},
    ]
    manifests = parse_manifest_list(json.dumps(payload))
    assert [m.cid for m in manifests] == ["zone", "ztwo"]
    assert [m.filename for m in manifests] == ["one.txt", "two.txt"]


def test_parse_manifest_list_empty_and_errors():
    assert parse_manifest_list("[]") == []
    with pytest.raises(StorageDataError, match="Failed to parse manifests"):
        parse_manifest_list(json.dumps([{"manifest": _manifest_json()}]))
    with pytest.raises(StorageDataError):
        parse_manifest_list("{}")


def test_space_round_trip():
    data = {
        "totalBlocks": 12,
        "quotaMaxBytes": 1000,
        "quotaUsedBytes": 250,
        "quotaReservedBytes": 100,
    }
    space = parse_space(json.dumps(data))
    assert space.to_dict() == data
    assert Space.from_dict(data) == space


def test_space_requires_all_fields():
    with pytest.raises(StorageDataError, match="Failed to parse space info"):
        parse_space(json.dumps({"totalBlocks": 1}))


def test_space_available_bytes_saturates():
    space = Space(quota_max_bytes=100, quota_used_bytes=150)
    assert space.available_bytes() == 0
    normal = Space(quota_max_bytes=1000, quota_used_bytes=250)
    assert normal.available_bytes() + normal.quota_used_bytes == normal.quota_max_bytes


def test_space_percentages():
    space = Space(quota_max_bytes=1000, quota_used_bytes=250, quota_reserved_bytes=100)
    assert space.usage_percentage() * 1000 == pytest.approx(250)
    assert space.reserved_percentage() * 1000 == pytest.approx(100)
    empty = Space()
    assert empty.usage_percentage() == 0.0
    assert empty.reserved_percentage() == 0.0


def test_space_fullness_thresholds():
    assert not Space(quota_max_bytes=100, quota_used_bytes=90).is_nearly_full()
    assert Space(quota_max_bytes=100, quota_used_bytes=91).is_nearly_full()
    assert not Space(quota_max_bytes=100, quota_used_bytes=95).is_critically_full()
    assert Space(quota_max_bytes=100, quota_used_bytes=96).is_critically_full()


def test_space_strings():
    space = Space(quota_max_bytes=2048, quota_used_bytes=1024)
    assert space.quota_max_string() == format_size(2048)
    assert space.quota_used_string() == format_size(1024)
    assert space.available_string() == format_size(space.available_bytes())


def test_parse_exists():
    assert parse_exists("true") is True
    assert parse_exists("false") is False
    with pytest.raises(StorageDataError, match="Failed to parse exists result"):
        parse_exists("True")