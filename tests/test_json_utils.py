import math

import pytest

from dezoomify.json_utils import all_json, iter_braces, number_or_string


def _braces(text):
    return [chunk.decode("utf-8", errors="replace") for chunk in iter_braces(text.encode())]


def test_iter_braces_nested_groups():
    assert _braces(" { a { b { c } d { e } f {{ g }}   ") == ["{ c }", "{ e }", "{ g }", "{{ g }}"]


def test_iter_braces_json():
    assert _braces('{"k":{"k":"v"}}') == ['{"k":"v"}', '{"k":{"k":"v"}}']


def test_iter_braces_unbalanced():
    assert _braces("xxx}}xx{{xxx{a}") == ["{a}"]


def test_iter_braces_only_open():
    assert list(iter_braces(b"{" * 1_000_000)) == []


def test_iter_braces_accepts_str():
    assert list(iter_braces("a{b}c")) == [b"{b}"]


def test_all_json_finds_objects():
    assert list(all_json(b'{{  "x":1}{-}--{{{"x":2}}')) == [{"x": 1}, {"x": 2}]


def test_all_json_unquoted_keys():
    data = b'var mainImage={ type: "zoomifytileservice", width: 62596, };'
    assert list(all_json(data)) == [{"type": "zoomifytileservice", "width": 62596}]


def test_all_json_skips_invalid_utf8():
    assert list(all_json(b'{"a":1}\xff{\xff}')) == [{"a": 1}]


def test_all_json_json5_syntax():
    data = b"{ /* c */ 'a': 'x\\'y', b: 0x1F, c: [1, 2,], // end\n d: +Infinity }"
    (value,) = list(all_json(data))
    assert value["a"] == "x'y"
    assert value["b"] == 31
    assert value["c"] == [1, 2]
    assert math.isinf(value["d"])


def test_all_json_inner_before_outer():
    assert list(all_json(b'{"k":{"k":"v"}}')) == [{"k": "v"}, {"k": {"k": "v"}}]


@pytest.mark.parametrize("value,expected", [("2422", 2422), (3000, 3000), ("+7", 7)])
def test_number_or_string(value, expected):
    assert number_or_string(value) == expected


@pytest.mark.parametrize("value", ["abc", "", " 12", "-3", "1.5"])
def test_number_or_string_bad_string(value):
    with pytest.raises(ValueError):
        number_or_string(value)


@pytest.mark.parametrize("value", [1.5, None, True, [1]])
def test_number_or_string_bad_type(value):
    with pytest.raises(TypeError):
        number_or_string(value)