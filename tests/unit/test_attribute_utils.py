import pytest

from iconkit.utils.attribute_utils import attribute_name, merge_classes, render_attributes


def test_render_attributes_empty():
    assert render_attributes({}) == ""
    assert render_attributes(None) == ""
    assert render_attributes({"a": False, "b": None}) == ""


def test_render_attributes_keeps_order_and_leading_space():
    out = render_attributes({"class": "w-4", "width": 24, "aria-hidden": "true"})
    assert out == ' class="w-4" width="24" aria-hidden="true"'


def test_render_attributes_bare_true():
    assert render_attributes({"hidden": True}) == " hidden"


def test_render_attributes_rejects_bad_names():
    with pytest.raises(ValueError):
        render_attributes({"on click": "x"})
    with pytest.raises(ValueError):
        render_attributes({'a"=b': "x"})


def test_merge_classes():
    assert merge_classes("icon", None, "", "w-4 icon", "  h-4 ") == "icon w-4 h-4"
    assert merge_classes() == ""


def test_attribute_name():
    assert attribute_name("aria_hidden") == "aria-hidden"
    assert attribute_name("class_") == "class"
    assert attribute_name("stroke_width") == "stroke-width"
    assert attribute_name("title") == "title"
