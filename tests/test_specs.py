import sys
import os
import logging

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))
from storefront.specs import parse_field, repair_inch_marks, spec_rows


def test_valid_escaped_json():
    assert parse_field('{"display":"15.6\\" screen"}', {}) == {"display": '15.6" screen'}


def test_unescaped_inch_mark_is_repaired():
    assert parse_field('{"display":"15.6" screen"}', {}) == {"display": '15.6" screen'}


def test_inch_mark_at_end_of_value_is_repaired():
    """Значение заканчивается дюймами: "15.6"" """
    assert parse_field('{"display":"15.6"","ram":"8GB"}', {}) == {
        "display": '15.6"',
        "ram": "8GB",
    }


def test_invalid_string_returns_fallback_and_logs(caplog):
    with caplog.at_level(logging.ERROR, logger="storefront.specs"):
        assert parse_field("totally invalid", {"fallback": True}) == {"fallback": True}
    assert "totally invalid" in caplog.text


def test_object_returned_as_is():
    value = {"already": 1}
    assert parse_field(value, {}) is value


def test_none_and_non_string_inputs():
    assert parse_field(None, {"x": 1}) == {"x": 1}
    assert parse_field(42, {"x": 1}) == {"x": 1}
    assert parse_field("", {"x": 1}) == {"x": 1}


def test_never_raises_on_deep_nesting():
    assert parse_field("[" * 100000, []) == []


def test_repair_leaves_json_delimiters_alone():
    text = '{"size":"15","list":["13", "14"]}'
    assert repair_inch_marks(text) == text


def test_spec_rows_from_dict_and_string():
    assert spec_rows('{"CPU":"i7","RAM":"16GB","Empty":""}') == [("CPU", "i7"), ("RAM", "16GB")]
    assert spec_rows({"Weight": 1.4}) == [("Weight", "1.4")]


def test_spec_rows_from_label_value_list():
    rows = spec_rows([{"label": "Display", "value": '14"'}, {"key": "GPU", "value": "RTX"}])
    assert rows == [("Display", '14"'), ("GPU", "RTX")]


def test_spec_rows_garbage():
    assert spec_rows("not json") == []
    assert spec_rows(None) == []
