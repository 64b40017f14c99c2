import pytest

from portraitgen.core.request_gate import validate_request
from portraitgen.errors import ErrorKind, GenerationError
from portraitgen.prompting.prompt_builder import STYLE_PROMPT


def _kind(data, principal):
    with pytest.raises(GenerationError) as excinfo:
        validate_request(data, principal)
    return excinfo.value.kind


def test_missing_principal_is_unauthenticated():
    assert _kind({"uid": "u1", "uploadId": "abc"}, None) is ErrorKind.UNAUTHENTICATED
    assert _kind({"uid": "u1", "uploadId": "abc"}, "") is ErrorKind.UNAUTHENTICATED


def test_unauthenticated_is_checked_before_fields():
    assert _kind({}, None) is ErrorKind.UNAUTHENTICATED


@pytest.mark.parametrize(
    "data",
    [
        {"uploadId": "abc"},
        {"uid": "u1"},
        {"uid": "", "uploadId": "abc"},
        {"uid": "u1", "uploadId": "   "},
        {"uid": 7, "uploadId": "abc"},
        {},
        None,
        ["u1", "abc"],
    ],
)
def test_missing_fields_are_invalid_argument(data):
    assert _kind(data, "u1") is ErrorKind.INVALID_ARGUMENT


def test_owner_mismatch_is_permission_denied():
    assert _kind({"uid": "u2", "uploadId": "abc"}, "u1") is ErrorKind.PERMISSION_DENIED


def test_testing_flag_selects_single_variation():
    request = validate_request({"uid": "u1", "uploadId": "abc", "forTesting": True}, "u1")

    assert request.count == 1
    assert request.for_testing is True
    assert request.original_path == "users/u1/original/abc.jpg"


def test_default_requests_four_variations_with_fixed_prompt():
    request = validate_request({"uid": "u1", "uploadId": "abc", "prompt": "ignored"}, "u1")

    assert request.count == 4
    assert request.for_testing is False
    assert request.prompt == STYLE_PROMPT


@pytest.mark.parametrize("upload_id", ["../x", "a/b", "..", ".", "a\\b", "../../victim/original/secret", "abc\x00"])
def test_upload_id_must_be_single_path_segment(upload_id):
    assert _kind({"uid": "u1", "uploadId": upload_id}, "u1") is ErrorKind.INVALID_ARGUMENT


def test_uid_must_be_single_path_segment():
    assert _kind({"uid": "../u1", "uploadId": "abc"}, "../u1") is ErrorKind.INVALID_ARGUMENT


def test_dots_inside_upload_id_are_allowed():
    assert validate_request({"uid": "u1", "uploadId": "photo.v2..final"}, "u1").upload_id == "photo.v2..final"
