import pytest

from reactprops.models import UtilityPick

SOURCE = """
interface BaseProps {
  id: string;
  count?: number;
}

interface ButtonProps extends BaseProps {
  label: string;
  size: 'small' | 'large';
  tags: string[];
  items: Array<number>;
  onClick: (event: MouseEvent, index: number) => void;
  icon: React.ReactNode;
  flag: true;
  avatar: string | null;
  style: { color: string; width?: number };
  render(value: string): JSX.Element;
  anything: never;
}

type Extra = { extra: boolean };
type Styled = ButtonProps & Extra & { own: string };
type Loose = Partial<BaseProps>;
type OnlyId = Pick<BaseProps, 'id'>;
type WithoutBoth = Omit<BaseProps, 'id' | 'count'>;
type Alias = string;
"""


@pytest.fixture(scope="module")
def result(collect):
    return collect(SOURCE)


@pytest.fixture(scope="module")
def button_props(result):
    return result.find_type("ButtonProps").props


def test_declarations_in_source_order(result):
    names = [t.name for t in result.types]
    assert names == ["BaseProps", "ButtonProps", "Extra", "Styled", "Loose", "OnlyId", "WithoutBoth", "Alias"]


def test_interface_members_and_optional_flag(result):
    base = result.find_type("BaseProps")
    assert base.props == {
        "id": {"type": "string", "optional": False},
        "count": {"type": "number", "optional": True},
    }
    assert base.extended is None


def test_extends_recorded(result):
    assert result.find_type("ButtonProps").extended == ["BaseProps"]


def test_literal_union(button_props):
    assert button_props["size"] == {
        "type": "union",
        "types": [
            {"type": "literal", "literal": {"type": "string", "value": "small"}},
            {"type": "literal", "literal": {"type": "string", "value": "large"}},
        ],
        "optional": False,
    }


def test_arrays(button_props):
    assert button_props["tags"] == {"type": "array", "elementType": {"type": "string"}, "optional": False}
    assert button_props["items"] == {"type": "array", "elementType": {"type": "number"}, "optional": False}


def test_function_type(button_props):
    assert button_props["onClick"] == {
        "type": "function",
        "returnType": {"type": "void"},
        "parameters": [
            {"type": "type_reference", "typeName": "MouseEvent", "name": "event"},
            {"type": "number", "name": "index"},
        ],
        "optional": False,
    }


def test_qualified_type_reference(button_props):
    assert button_props["icon"] == {"type": "type_reference", "typeName": "React.ReactNode", "optional": False}


def test_boolean_literal_and_null(button_props):
    assert button_props["flag"] == {
        "type": "literal",
        "literal": {"type": "boolean", "value": True},
        "optional": False,
    }
    assert button_props["avatar"]["types"] == [{"type": "string"}, {"type": "null"}]


def test_inline_object(button_props):
    assert button_props["style"] == {
        "type": "object",
        "props": {
            "color": {"type": "string", "optional": False},
            "width": {"type": "number", "optional": True},
        },
        "optional": False,
    }


def test_method_signature(button_props):
    assert button_props["render"] == {
        "type": "function",
        "returnType": {"type": "type_reference", "typeName": "JSX.Element"},
        "parameters": [{"type": "string", "name": "value"}],
        "optional": False,
    }


def test_unsupported_keyword_is_unknown(button_props):
    assert button_props["anything"] == {"type": "unknown", "optional": False}


def test_intersection(result):
    styled = result.find_type("Styled")
    assert styled.intersection_types == ["ButtonProps", "Extra"]
    assert styled.props == {"own": {"type": "string", "optional": False}}


def test_partial_pick_omit(result):
    assert result.find_type("Loose").partial == "BaseProps"
    assert result.find_type("OnlyId").pick == UtilityPick(type_name="BaseProps", props=["id"])
    assert result.find_type("WithoutBoth").omit == UtilityPick(type_name="BaseProps", props=["id", "count"])


def test_non_object_alias_has_no_props(result):
    alias = result.find_type("Alias")
    assert alias.props == {}
    assert alias.is_resolved


def test_to_dict_uses_camel_case(result):
    assert result.find_type("Styled").to_dict() == {
        "name": "Styled",
        "props": {"own": {"type": "string", "optional": False}},
        "intersectionTypes": ["ButtonProps", "Extra"],
    }
    assert result.find_type("OnlyId").to_dict()["pick"] == {"typeName": "BaseProps", "props": ["id"]}
