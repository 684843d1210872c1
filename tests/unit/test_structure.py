import pytest

import mini_json as mj
from json_value import Array, Bool, Null, Number, Object, String


def test_empty_containers():
    assert mj.parse("[]") == Array(())
    assert mj.parse("{}") == Object(())
    assert mj.parse("[ \n ]") == Array(())
    assert mj.parse("{\t}") == Object(())


def test_array_preserves_order():
    assert mj.parse('[null, true, 1, "a"]') == Array((Null(), Bool(True), Number(1), String("a")))


def test_object_single_member():
    assert mj.parse('{"key": "value"}') == Object((("key", String("value")),))


def test_nested_objects():
    assert mj.parse('{"outer": {"inner": "value"}}') == Object((
        ("outer", Object((("inner", String("value")),))),
    ))


def test_duplicate_keys_preserved_in_order():
    result = mj.parse('{"a": 1, "a": 2}')
    assert result == Object((("a", Number(1)), ("a", Number(2))))
    assert result.keys() == ("a", "a")
    assert result.get("a") == Number(1)


def test_duplicate_key_rejected_on_request():
    with pytest.raises(mj.Malformed) as ei:
        mj.parse('{"a":1,"a":2}', reject_duplicate_keys=True)
    assert "duplicate key 'a'" in str(ei.value)


def test_duplicate_keys_in_sibling_objects_are_fine_in_strict_mode():
    assert mj.parse('[{"a":1},{"a":2}]', reject_duplicate_keys=True) == Array((
        Object((("a", Number(1)),)),
        Object((("a", Number(2)),)),
    ))


def test_whitespace_around_punctuation():
    text = ' {\n\t"a" :\r\n[ 1 ,2 , { } ] ,  "b":null } '
    assert mj.parse(text) == Object((
        ("a", Array((Number(1), Number(2), Object(())))),
        ("b", Null()),
    ))


def test_whitespace_inside_strings_is_kept():
    assert mj.parse('[" a ", "b "]') == Array((String(" a "), String("b ")))


def test_keys_are_not_trimmed():
    assert mj.parse('{" k ":1}').keys() == (" k ",)


def test_deep_nesting_within_limit():
    depth = mj.DEPTH_LIMIT_DEFAULT
    value = mj.parse("[" * depth + "]" * depth)
    for _ in range(depth - 1):
        assert len(value) == 1
        value = value.items[0]
    assert value == Array(())


def test_nesting_past_limit_is_malformed():
    depth = mj.DEPTH_LIMIT_DEFAULT + 1
    with pytest.raises(mj.Malformed) as ei:
        mj.parse("[" * depth + "]" * depth)
    assert "depth limit exceeded" in str(ei.value)


def test_max_depth_counts_objects_and_arrays():
    assert mj.parse('{"a":[1]}', max_depth=2) == Object((("a", Array((Number(1),))),))
    with pytest.raises(mj.Malformed):
        mj.parse('{"a":[1]}', max_depth=1)


def test_max_depth_zero_still_allows_scalars():
    assert mj.parse("7", max_depth=0) == Number(7)
    with pytest.raises(mj.Malformed):
        mj.parse("[]", max_depth=0)


def test_scalar_roots():
    assert mj.parse("null") == Null()
    assert mj.parse(" false\n") == Bool(False)
    assert mj.parse('"x"') == String("x")


def test_parsing_is_deterministic():
    text = '{"a": [1, {"b": null}], "a": "c"}'
    assert mj.parse(text) == mj.parse(text)


def test_extra_data_reports_offset():
    with pytest.raises(mj.TrailingData) as ei:
        mj.parse("[1] 2")
    assert "trailing data after root value at offset 4" in str(ei.value)


@pytest.mark.parametrize("text", ["null x", "true,", '"a""b"', "{}}", "1 2"])
def test_trailing_non_whitespace_fails(text):
    with pytest.raises(mj.TrailingData):
        mj.parse(text)


def test_missing_comma_in_object_reports_expected():
    with pytest.raises(mj.Malformed) as ei:
        mj.parse('{"a":1 "b":2}')
    assert "expected '}'" in str(ei.value)


def test_missing_colon_in_object():
    with pytest.raises(mj.Malformed) as ei:
        mj.parse('{"a" 1}')
    assert "expected ':'" in str(ei.value)


def test_missing_value_after_colon():
    with pytest.raises(mj.Malformed):
        mj.parse('{"a":}')


def test_missing_closing_bracket_in_array():
    with pytest.raises(mj.Malformed) as ei:
        mj.parse("[1,2")
    assert "expected ']' at offset 4" in str(ei.value)


@pytest.mark.parametrize("text", ["[1,2,]", '{"a":1,}', "[,]", "[,1]"])
def test_trailing_or_leading_comma_rejected(text):
    with pytest.raises(mj.Malformed):
        mj.parse(text)


def test_unterminated_string_inside_array():
    with pytest.raises(mj.Malformed) as ei:
        mj.parse('["abc')
    assert "unterminated string starting at offset 1" in str(ei.value)


def test_oversized_number_inside_object():
    with pytest.raises(mj.Malformed):
        mj.parse('{"n": 99999999999999999999}')


@pytest.mark.parametrize("text", ["-1", "1.5", "1e3", "+2"])
def test_reduced_grammar_rejects_signed_and_fractional_numbers(text):
    with pytest.raises(mj.ParseError):
        mj.parse(text)


def test_non_string_key_rejected():
    with pytest.raises(mj.Malformed):
        mj.parse("{1:2}")


def test_duplicate_key_reported_at_repeated_key():
    text = '{"a": 1, "b": [2], "a": 3}'
    repeated = text.rindex('"a"')
    with pytest.raises(mj.Malformed) as ei:
        mj.parse(text, reject_duplicate_keys=True)
    assert ei.value.pos == repeated
    assert f"duplicate key 'a' at offset {repeated}" in str(ei.value)


def test_nesting_past_interpreter_stack_is_malformed_not_recursion_error():
    depth = 5000
    with pytest.raises(mj.Malformed) as ei:
        mj.parse("[" * depth + "]" * depth, max_depth=depth * 2)
    assert "depth limit exceeded" in str(ei.value)


def test_deep_objects_past_interpreter_stack_are_malformed():
    depth = 3000
    with pytest.raises(mj.Malformed) as ei:
        mj.parse('{"a":' * depth + "1" + "}" * depth, max_depth=depth * 2)
    assert "depth limit exceeded" in str(ei.value)
