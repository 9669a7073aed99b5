import pytest

from usm2.strutil import format_float, replace_all


def test_replace_all_replaces_every_occurrence():
    result = replace_all("a-b-c-d", "-", "+")
    assert "-" not in result
    assert result.count("+") == 3
    assert result.replace("+", "-") == "a-b-c-d"


def test_replace_all_does_not_rescan_inserted_text():
    assert replace_all("aa", "a", "aa") == "aaaa"


def test_replace_all_empty_old_is_noop():
    assert replace_all("hello", "", "x") == "hello"


def test_replace_all_none_deletes():
    assert replace_all("xaxbx", "x", None) == "ab"


def test_replace_all_same_text_is_identity():
    text = "one two one"
    assert replace_all(text, "one", "one") == text


@pytest.mark.parametrize("value", [1.5, 0.25, 12.125, 100.0, 3.0])
def test_format_float_round_trips(value):
    text = format_float(value, 6)
    assert float(text) == pytest.approx(value, abs=1e-6)
    assert not text.endswith(".")
    if "." in text:
        assert not text.endswith("0")


def test_format_float_drops_dangling_point():
    assert format_float(2.0, 6) == "2"


def test_format_float_zero_digits_keeps_integer_form():
    text = format_float(3.0, 0)
    assert text == "3"


def test_format_float_limits_decimals():
    text = format_float(1.23456789, 3)
    assert len(text.split(".")[1]) <= 3
    assert float(text) == pytest.approx(1.235, abs=1e-9)


def test_format_float_rejects_negative_digits():
    with pytest.raises(ValueError):
        format_float(1.0, -1)