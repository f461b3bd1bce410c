"""Unit tests for api/decoder.py — fixed-shape response decoding."""

import json

import pytest

from dropcore.api.decoder import (
    MAX_CONTENTS_DEPTH,
    decode_account_info,
    decode_copy_ref,
    decode_file_list,
    decode_file_metadata,
    decode_json,
    decode_share_link,
    file_metadata_from_dict,
    read_uint,
)
from dropcore.api.errors import DecodeError, TransportError
from dropcore.api.models import AccountInfo, CopyReference, FileMetadata, QuotaInfo, ShareLink

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_FILE = {
    "size": "225.4KB",
    "rev": "35e97029684fe",
    "thumb_exists": False,
    "bytes": 230783,
    "modified": "Tue, 19 Jul 2011 21:55:38 +0000",
    "client_mtime": "Mon, 18 Jul 2011 18:04:35 +0000",
    "path": "/Getting_Started.pdf",
    "is_dir": False,
    "icon": "page_white_acrobat",
    "root": "app_folder",
    "mime_type": "application/pdf",
    "revision": 220823,
}


def _body(value: object) -> bytes:
    return json.dumps(value).encode()


# ---------------------------------------------------------------------------
# decode_json tests
# ---------------------------------------------------------------------------


class TestDecodeJson:
    def test_parses_valid_json(self) -> None:
        assert decode_json(b'{"a": [1, 2]}') == {"a": [1, 2]}

    def test_malformed_json_raises_decode_error(self) -> None:
        with pytest.raises(DecodeError, match="Invalid JSON") as exc_info:
            decode_json(b"<html>oops</html>", "https://api.dropbox.com/1/delta")
        assert exc_info.value.endpoint == "https://api.dropbox.com/1/delta"

    def test_invalid_utf8_raises_decode_error(self) -> None:
        with pytest.raises(DecodeError):
            decode_json(b"\xff\xfe\xfa")

    def test_decode_error_is_not_a_transport_error(self) -> None:
        with pytest.raises(DecodeError) as exc_info:
            decode_json(b"not json")
        assert not isinstance(exc_info.value, TransportError)

    def test_deeply_nested_json_raises_decode_error(self) -> None:
        with pytest.raises(DecodeError, match="nested too deeply"):
            decode_json(b"[" * 100000 + b"]" * 100000)


# ---------------------------------------------------------------------------
# read_uint tests
# ---------------------------------------------------------------------------


class TestReadUint:
    def test_truncates_float_toward_zero(self) -> None:
        assert read_uint({"bytes": 1024.9}, "bytes") == 1024

    def test_accepts_integer(self) -> None:
        assert read_uint({"bytes": 7}, "bytes") == 7

    def test_missing_or_null_is_zero(self) -> None:
        assert read_uint({}, "bytes") == 0
        assert read_uint({"bytes": None}, "bytes") == 0

    @pytest.mark.parametrize("value", [True, "12", -1, -0.5, float("inf"), float("nan")])
    def test_rejects_invalid_values(self, value: object) -> None:
        with pytest.raises(DecodeError, match="bytes"):
            read_uint({"bytes": value}, "bytes")


# ---------------------------------------------------------------------------
# File metadata tests
# ---------------------------------------------------------------------------


class TestFileMetadata:
    def test_decodes_all_fields(self) -> None:
        metadata = decode_file_metadata(_body(_FILE))
        assert metadata == FileMetadata(
            size="225.4KB",
            rev="35e97029684fe",
            thumb_exists=False,
            bytes=230783,
            modified="Tue, 19 Jul 2011 21:55:38 +0000",
            path="/Getting_Started.pdf",
            is_dir=False,
            icon="page_white_acrobat",
            root="app_folder",
            mime_type="application/pdf",
            revision=220823,
        )

    def test_folder_contents_decoded_recursively(self) -> None:
        folder = {
            "path": "/Photos",
            "is_dir": True,
            "contents": [
                {"path": "/Photos/a.jpg", "bytes": 10},
                {"path": "/Photos/Sub", "is_dir": True, "contents": [{"path": "/Photos/Sub/b"}]},
            ],
        }
        metadata = decode_file_metadata(_body(folder))

        assert metadata.is_dir is True
        assert [c.path for c in metadata.contents] == ["/Photos/a.jpg", "/Photos/Sub"]
        assert metadata.contents[1].contents[0].path == "/Photos/Sub/b"

    def test_wrong_field_type_raises_decode_error(self) -> None:
        with pytest.raises(DecodeError, match="is_dir"):
            file_metadata_from_dict({"path": "/a", "is_dir": "yes"})

    def test_non_object_body_raises_decode_error(self) -> None:
        with pytest.raises(DecodeError, match="object"):
            decode_file_metadata(_body(["/a"]))

    def test_contents_must_be_list(self) -> None:
        with pytest.raises(DecodeError, match="contents"):
            file_metadata_from_dict({"contents": {"path": "/a"}})

    def test_contents_nested_too_deeply_raises_decode_error(self) -> None:
        folder: dict[str, object] = {"path": "/leaf"}
        for _ in range(MAX_CONTENTS_DEPTH + 1):
            folder = {"is_dir": True, "contents": [folder]}
        with pytest.raises(DecodeError, match="nested deeper"):
            decode_file_metadata(_body(folder))

    def test_contents_at_depth_limit_are_decoded(self) -> None:
        folder: dict[str, object] = {"path": "/leaf"}
        for _ in range(MAX_CONTENTS_DEPTH):
            folder = {"is_dir": True, "contents": [folder]}
        metadata = decode_file_metadata(_body(folder))
        for _ in range(MAX_CONTENTS_DEPTH):
            metadata = metadata.contents[0]
        assert metadata.path == "/leaf"


class TestFileList:
    def test_decodes_list(self) -> None:
        files = decode_file_list(_body([_FILE, {"path": "/b.txt", "rev": "2"}]))
        assert [f.path for f in files] == ["/Getting_Started.pdf", "/b.txt"]

    def test_empty_list(self) -> None:
        assert decode_file_list(b"[]") == []

    def test_object_instead_of_list_raises_decode_error(self) -> None:
        with pytest.raises(DecodeError, match="list"):
            decode_file_list(_body({"path": "/a"}))

    def test_non_object_item_raises_decode_error(self) -> None:
        with pytest.raises(DecodeError):
            decode_file_list(_body([_FILE, "oops"]))


# ---------------------------------------------------------------------------
# Account / link / copy_ref tests
# ---------------------------------------------------------------------------


class TestAccountInfo:
    def test_decodes_account_and_quota(self) -> None:
        body = _body(
            {
                "referral_link": "https://www.dropbox.com/referrals/r1a2n3d4m5s6t7",
                "display_name": "John P. User",
                "uid": 12345678,
                "country": "US",
                "email": "john@example.com",
                "quota_info": {
                    "shared": 253738410565,
                    "quota": 107374182400000,
                    "normal": 680031877871,
                },
            }
        )
        assert decode_account_info(body) == AccountInfo(
            referral_link="https://www.dropbox.com/referrals/r1a2n3d4m5s6t7",
            display_name="John P. User",
            country="US",
            email="john@example.com",
            uid=12345678,
            quota_info=QuotaInfo(shared=253738410565, quota=107374182400000, normal=680031877871),
        )

    def test_missing_quota_defaults_to_zero(self) -> None:
        info = decode_account_info(_body({"display_name": "Jane"}))
        assert info.quota_info == QuotaInfo()

    def test_bad_quota_raises_decode_error(self) -> None:
        with pytest.raises(DecodeError, match="quota_info"):
            decode_account_info(_body({"quota_info": [1, 2, 3]}))


class TestShareLinkAndCopyRef:
    def test_decodes_share_link(self) -> None:
        expires = "Tue, 01 Jan 2030 00:00:00 +0000"
        body = _body({"url": "https://db.tt/c0mFuu1Y", "expires": expires})
        assert decode_share_link(body) == ShareLink(url="https://db.tt/c0mFuu1Y", expires=expires)

    def test_share_link_without_url_raises_decode_error(self) -> None:
        with pytest.raises(DecodeError, match="url"):
            decode_share_link(_body({"expires": "never"}))

    def test_decodes_copy_ref(self) -> None:
        expires = "Fri, 31 Jan 2042 21:01:05 +0000"
        body = _body({"copy_ref": "z1X6ATl6aWtzOGq0c3g5Ng", "expires": expires})
        assert decode_copy_ref(body) == CopyReference(
            copy_ref="z1X6ATl6aWtzOGq0c3g5Ng", expires=expires
        )

    def test_copy_ref_missing_field_raises_decode_error(self) -> None:
        with pytest.raises(DecodeError, match="copy_ref"):
            decode_copy_ref(_body({"expires": "x"}))
