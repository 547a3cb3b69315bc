"""Tests for local $ref resolution."""

from openapi_scorecard.core.refs import (
    Reference,
    as_reference,
    classify,
    resolve,
    resolve_pointer,
    unescape,
)

DOC = {
    "components": {
        "schemas": {
            "Pet": {"type": "object"},
            "Alias": {"$ref": "#/components/schemas/Pet"},
            "LoopA": {"$ref": "#/components/schemas/LoopB"},
            "LoopB": {"$ref": "#/components/schemas/LoopA"},
            "Self": {"$ref": "#/components/schemas/Self"},
            "Nothing": None,
        },
        "parameters": {"a/b": {"name": "slash"}, "t~n": {"name": "tilde"}},
    },
    "servers": [{"url": "https://api.example.com"}],
}


class TestUnescape:
    """Test RFC 6901 segment unescaping."""

    def test_slash_and_tilde(self) -> None:
        """~1 becomes / and ~0 becomes ~."""
        assert unescape("a~1b") == "a/b"
        assert unescape("t~0n") == "t~n"

    def test_order_does_not_double_unescape(self) -> None:
        """~01 is a literal ~1, not a slash."""
        assert unescape("~01") == "~1"


class TestResolvePointer:
    """Test walking a JSON pointer through a document."""

    def test_resolves_nested_mapping(self) -> None:
        """A valid pointer returns the target node."""
        assert resolve_pointer("#/components/schemas/Pet", DOC) == {"type": "object"}

    def test_escaped_segments(self) -> None:
        """Escaped segments address keys containing / and ~."""
        assert resolve_pointer("#/components/parameters/a~1b", DOC) == {"name": "slash"}
        assert resolve_pointer("#/components/parameters/t~0n", DOC) == {"name": "tilde"}

    def test_list_index(self) -> None:
        """Numeric segments index into lists."""
        assert resolve_pointer("#/servers/0/url", DOC) == "https://api.example.com"

    def test_missing_segment_returns_none(self) -> None:
        """A dangling pointer is absence, not a fault."""
        assert resolve_pointer("#/components/schemas/Missing", DOC) is None

    def test_out_of_range_index_returns_none(self) -> None:
        assert resolve_pointer("#/servers/3", DOC) is None
        assert resolve_pointer("#/servers/first", DOC) is None

    def test_non_local_pointer_returns_none(self) -> None:
        """External and malformed pointers are not resolved."""
        assert resolve_pointer("other.yaml#/components/schemas/Pet", DOC) is None
        assert resolve_pointer("components/schemas/Pet", DOC) is None

    def test_scalar_intermediate_returns_none(self) -> None:
        """Walking through a scalar stops."""
        assert resolve_pointer("#/servers/0/url/host", DOC) is None

    def test_null_target_returns_none(self) -> None:
        assert resolve_pointer("#/components/schemas/Nothing", DOC) is None


class TestResolve:
    """Test resolving inline-or-reference nodes."""

    def test_inline_mapping_is_returned_as_is(self) -> None:
        node = {"type": "string"}
        assert resolve(node, DOC) is node

    def test_follows_reference_chain(self) -> None:
        """A reference to a reference resolves to the final mapping."""
        assert resolve({"$ref": "#/components/schemas/Alias"}, DOC) == {"type": "object"}

    def test_cycle_returns_none(self) -> None:
        """Reference loops are reported as unresolvable instead of recursing forever."""
        assert resolve({"$ref": "#/components/schemas/LoopA"}, DOC) is None
        assert resolve({"$ref": "#/components/schemas/Self"}, DOC) is None

    def test_non_mapping_target_returns_none(self) -> None:
        assert resolve({"$ref": "#/servers"}, DOC) is None

    def test_non_mapping_node_returns_none(self) -> None:
        assert resolve("not a node", DOC) is None
        assert resolve(None, DOC) is None


class TestClassify:
    """Test the reference/inline split."""

    def test_reference(self) -> None:
        result = classify({"$ref": "#/components/schemas/Pet"})
        assert isinstance(result, Reference)
        assert result.pointer == "#/components/schemas/Pet"

    def test_inline(self) -> None:
        node = {"type": "string"}
        assert classify(node) is node

    def test_other(self) -> None:
        assert classify([1, 2]) is None

    def test_non_string_ref_is_inline(self) -> None:
        """A $ref that is not a string is not a reference."""
        assert as_reference({"$ref": 42}) is None


class TestReference:
    """Test Reference helpers."""

    def test_name_is_unescaped_last_segment(self) -> None:
        assert Reference("#/components/parameters/a~1b").name == "a/b"

    def test_is_local(self) -> None:
        assert Reference("#/components/schemas/Pet").is_local
        assert not Reference("https://example.com/pet.yaml").is_local
