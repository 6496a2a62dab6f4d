"""Unit tests for the protobuf sanitizing transform."""

from __future__ import annotations

import pytest

from core.types import SanitizeRules
from tests.fixture_paths import fixture_path
from transforms.proto_sanitizer import sanitize, sanitize_document

_HTTP_OPEN = "      option (google.api.http) = {\n"


def _read_fixture(name: str) -> str:
    return fixture_path(f"protos/{name}").read_text(encoding="utf-8")


def test_sanitize_deletes_annotations_import() -> None:
    """The google.api annotations import should be removed entirely."""
    assert sanitize('import "google/api/annotations.proto";') == ""


def test_sanitize_deletes_gogoproto_import_with_surrounding_whitespace() -> None:
    """Vendor import matching should ignore surrounding whitespace."""
    text = '  import "gogoproto/gogo.proto";  \nsyntax = "proto3";\n'

    assert sanitize(text) == 'syntax = "proto3";\n'


def test_sanitize_flattens_import_path() -> None:
    """Import paths with directories should keep only the base name."""
    assert sanitize('import "a/b/c.proto";') == 'import "c.proto";'


def test_sanitize_flattening_preserves_quotes_modifier_and_comment() -> None:
    """Only the directory part of the quoted path should change."""
    text = "import public 'etcd/mvcc/mvccpb/kv.proto';  // keys\r\n"

    assert sanitize(text) == "import public 'kv.proto';  // keys\r\n"


def test_sanitize_leaves_flat_import_untouched() -> None:
    """Imports without a directory should pass through."""
    text = 'import "kv.proto";\n'

    assert sanitize(text) == text


def test_sanitize_removes_http_option_block() -> None:
    """An http option block should be removed through its closing line."""
    text = 'option (google.api.http) = {\n  get: "/v3/foo"\n};\nmessage Foo {}\n'

    assert sanitize(text) == "message Foo {}\n"


@pytest.mark.parametrize("inner_line_count", [0, 1, 5])
def test_sanitize_removes_block_regardless_of_inner_lines(inner_line_count: int) -> None:
    """Block removal should span any number of lines between the markers."""
    inner_lines = "".join(f'        field_{index}: "{index}"\n' for index in range(inner_line_count))
    text = f"rpc Range(RangeRequest) returns (RangeResponse) {{\n{_HTTP_OPEN}{inner_lines}    }};\n}}\n"

    assert sanitize(text) == "rpc Range(RangeRequest) returns (RangeResponse) {\n}\n"


def test_sanitize_removes_single_line_block() -> None:
    """A block closed on its opening line should not swallow later lines."""
    text = 'option (google.api.http) = { get: "/v3/foo" };\nmessage Foo {}\n'

    assert sanitize(text) == "message Foo {}\n"


def test_sanitize_closes_block_on_first_closing_marker() -> None:
    """Blocks end at the first closing marker even if braces nest."""
    text = (
        "option (google.api.http) = {\n"
        "  additional_bindings: {\n"
        '    get: "/v3/bar"\n'
        "  };\n"
        '  get: "/v3/foo"\n'
        "};\n"
    )

    assert sanitize(text) == '  get: "/v3/foo"\n};\n'


def test_sanitize_passes_through_non_matching_lines() -> None:
    """Lines matching no rule should be emitted byte-for-byte."""
    text = 'syntax = "proto3";  \r\noption go_package = "mvccpb";\n\tbytes key = 1;\nmessage Foo {}'

    assert sanitize(text) == text


def test_sanitize_keeps_non_vendor_option_statements() -> None:
    """Only options in vendor extension namespaces should be removed."""
    text = "option (gogoproto.sizer_all) = true;\noption (custom.flag) = true;\n"

    assert sanitize(text) == "option (custom.flag) = true;\n"


def test_sanitize_drops_vendor_import_inside_block_as_block_content() -> None:
    """Lines inside a block are dropped without changing block tracking."""
    text = (
        "option (google.api.http) = {\n"
        'import "gogoproto/gogo.proto";\n'
        "};\n"
        'import "x/y.proto";\n'
    )

    assert sanitize(text) == 'import "y.proto";\n'


def test_sanitize_matches_etcd_rpc_fixture() -> None:
    """A realistic rpc.proto excerpt should sanitize to the expected copy."""
    assert sanitize(_read_fixture("rpc_raw.proto")) == _read_fixture("rpc_expected.proto")


def test_sanitize_matches_etcd_kv_fixture() -> None:
    """File-level gogoproto options should be removed from kv.proto."""
    assert sanitize(_read_fixture("kv_raw.proto")) == _read_fixture("kv_expected.proto")


def test_sanitize_is_idempotent_on_sanitized_text() -> None:
    """Running the sanitizer on its own output should change nothing."""
    sanitized = _read_fixture("rpc_expected.proto")

    assert sanitize(sanitized) == sanitized


def test_sanitize_document_reports_edits() -> None:
    """The report should count dropped lines, rewrites, stripped options, and blocks."""
    result = sanitize_document(_read_fixture("rpc_raw.proto"))

    assert (
        result.dropped_line_count,
        result.rewritten_import_count,
        result.stripped_field_option_count,
        result.removed_block_count,
        result.unterminated_block,
    ) == (12, 2, 1, 2, False)


def test_sanitize_document_flags_unterminated_block() -> None:
    """A document ending inside a block should drop the tail and say so."""
    result = sanitize_document('message Foo {}\noption (google.api.http) = {\n  get: "/v3/foo"\n')

    assert result.text == "message Foo {}\n" and result.unterminated_block


def test_sanitize_honors_custom_rules() -> None:
    """Custom rule sets should replace the default vendor extensions."""
    rules = SanitizeRules(
        vendor_imports=("validate/validate.proto",),
        vendor_option_namespaces=("validate",),
        block_option_name="grpc.gateway.openapiv2_options",
    )
    text = (
        'import "validate/validate.proto";\n'
        'import "google/api/annotations.proto";\n'
        "option (grpc.gateway.openapiv2_options) = {\n"
        '  info: { title: "x" }\n'
        "};\n"
    )

    assert sanitize(text, rules) == 'import "annotations.proto";\n'


def test_sanitize_flattens_unrelated_import_sharing_vendor_base_name() -> None:
    """Only full vendor paths are deleted; same-named project files are kept."""
    assert sanitize('import "myapp/transport/http.proto";\n') == 'import "http.proto";\n'


@pytest.mark.parametrize(
    ("import_path", "flattened_name"),
    [
        ("myapp/google/api/annotations_v2.proto", "annotations_v2.proto"),
        ("vendor/gogoproto/gogo_ext.proto", "gogo_ext.proto"),
        ("third_party/google/api/annotations.proto", "annotations.proto"),
        ("google/api/http.proto", "http.proto"),
        ("gogoproto/gogo.proto.orig", "gogo.proto.orig"),
    ],
)
def test_sanitize_flattens_imports_near_vendor_paths(import_path: str, flattened_name: str) -> None:
    """Imports that only resemble a vendor path should be flattened, not deleted."""
    assert sanitize(f'import "{import_path}";\n') == f'import "{flattened_name}";\n'


def test_sanitize_removes_inline_gogoproto_field_option() -> None:
    """A field option list holding only vendor entries should disappear."""
    text = 'import "gogoproto/gogo.proto";\nmessage A {\n  bytes key = 1 [(gogoproto.nullable) = false];\n}\n'

    assert sanitize(text) == "message A {\n  bytes key = 1;\n}\n"


@pytest.mark.parametrize(
    ("line", "expected"),
    [
        (
            "  bytes key = 1 [(gogoproto.nullable) = false, deprecated = true];\n",
            "  bytes key = 1 [deprecated = true];\n",
        ),
        (
            '  bytes key = 1 [deprecated = true, (gogoproto.customname) = "A, B"];\n',
            "  bytes key = 1 [deprecated = true];\n",
        ),
        (
            "  repeated Event events = 2 [(gogoproto.nullable) = false, (gogoproto.moretags) = 'x'];\n",
            "  repeated Event events = 2;\n",
        ),
    ],
)
def test_sanitize_keeps_non_vendor_field_options(line: str, expected: str) -> None:
    """Only vendor entries are removed from a field option list."""
    assert sanitize(line) == expected


def test_sanitize_leaves_non_vendor_field_options_untouched() -> None:
    """Option lists without vendor entries should pass through byte-for-byte."""
    text = '  repeated int32 ids = 1 [packed = true,deprecated=true];\n  string s = 2 [default = "[x]"];\n'

    assert sanitize(text) == text


def test_sanitize_counts_stripped_field_option_lines() -> None:
    """Each line with vendor field options removed should be counted once."""
    result = sanitize_document(_read_fixture("kv_raw.proto"))

    assert result.stripped_field_option_count == 1 and result.dropped_line_count == 6


def test_sanitize_splits_lines_only_on_newline() -> None:
    """Other Unicode line breaks are content, not line terminators."""
    text = "message A {} // note\x85option (google.api.http) = {\nmessage B {}\n};\n"

    assert sanitize(text) == text


def test_sanitize_preserves_bare_carriage_return_inside_line() -> None:
    """A lone carriage return should not end a line."""
    text = 'syntax = "proto3";\rimport "a/b/c.proto";\n'

    assert sanitize(text) == text
