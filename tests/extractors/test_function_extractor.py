import pytest

SOURCE = """
import React from 'react';

interface Props { title: string; }

export function Plain(props) {
  return <div>{props.title} {props.user.name}</div>;
}

export function Destructured({ label, size = 'md', count = 3, enabled = true, config = { a: 1 }, list = [], other: renamed = -1 }) {
  return <span>{label}</span>;
}

export function Typed({ title }: Props) {
  return <h1>{title}</h1>;
}

export function Inline({ name, age = 30 }: { name: string; age?: number }) {
  return <p>{name}</p>;
}

export function Generic<T>(props: { items: T[]; selected: T }) {
  return null;
}

function helper(a: number, b: string): number {
  return a;
}

function noReturn() {
  console.log('x');
}

function nested() {
  {
    return [1, 2];
  }
}

function bare() {
  return;
}

const Arrow = (props) => <b>{props.text}</b>;
const Obj = () => ({ a: 1 });
const Str = () => 'hello';
const Annotated = (): boolean => true;
"""

UNKNOWN = {"type": "unknown", "optional": False}
JSX_ELEMENT = {"type": "type_reference", "typeName": "JSX.Element"}


@pytest.fixture(scope="module")
def result(collect):
    return collect(SOURCE)


def test_functions_in_source_order(result):
    assert [f.name for f in result.functions] == [
        "Plain", "Destructured", "Typed", "Inline", "Generic",
        "helper", "noReturn", "nested", "bare",
        "Arrow", "Obj", "Str", "Annotated",
    ]


def test_props_usage_scanned_for_untyped_parameter(result):
    plain = result.find_function("Plain")
    assert plain.arguments == [{
        "type": "object",
        "name": "props",
        "props": {
            "title": UNKNOWN,
            "user": {"type": "object", "props": {"name": UNKNOWN}, "optional": False},
        },
    }]
    assert plain.return_type == JSX_ELEMENT


def test_destructured_defaults_are_serialized(result):
    arg = result.find_function("Destructured").arguments[0]
    assert arg["type"] == "object"
    assert "typeName" not in arg
    props = arg["props"]
    assert props["label"] == UNKNOWN
    assert props["size"]["defaultValue"] == '"md"'
    assert props["count"]["defaultValue"] == "3"
    assert props["enabled"]["defaultValue"] == "true"
    assert props["config"]["defaultValue"] == "{ a: 1 }"
    assert props["list"]["defaultValue"] == "[]"
    assert props["other"] == {"type": "unknown", "optional": False, "defaultValue": "-1"}


def test_destructured_with_named_type(result):
    assert result.find_function("Typed").arguments == [{
        "type": "object",
        "props": {"title": UNKNOWN},
        "typeName": "Props",
    }]


def test_destructured_with_inline_type_keeps_defaults(result):
    assert result.find_function("Inline").arguments == [{
        "type": "object",
        "props": {
            "name": {"type": "string", "optional": False},
            "age": {"type": "number", "optional": True, "defaultValue": "30"},
        },
    }]


def test_generic_params_mark_references(result):
    generic = result.find_function("Generic")
    assert generic.generic_params == ["T"]
    t_ref = {"type": "type_reference", "typeName": "T", "isGeneric": True}
    assert generic.arguments[0]["props"] == {
        "items": {"type": "array", "elementType": t_ref, "optional": False},
        "selected": {**t_ref, "optional": False},
    }
    assert generic.return_type == {"type": "unknown"}


def test_typed_parameters_and_annotated_return(result):
    helper = result.find_function("helper")
    assert helper.arguments == [{"type": "number", "name": "a"}, {"type": "string", "name": "b"}]
    assert helper.return_type == {"type": "number"}
    assert helper.generic_params is None


@pytest.mark.parametrize("name, expected", [
    ("noReturn", {"type": "void"}),
    ("bare", {"type": "void"}),
    ("nested", {"type": "array", "elementType": {"type": "unknown"}}),
    ("Arrow", JSX_ELEMENT),
    ("Obj", {"type": "object"}),
    ("Str", {"type": "string"}),
    ("Annotated", {"type": "boolean"}),
])
def test_return_type_inference(result, name, expected):
    assert result.find_function(name).return_type == expected


def test_arrow_props_usage(result):
    assert result.find_function("Arrow").arguments[0]["props"] == {"text": UNKNOWN}


def test_to_dict(result):
    row = result.find_function("helper").to_dict()
    assert row == {
        "name": "helper",
        "arguments": [{"type": "number", "name": "a"}, {"type": "string", "name": "b"}],
        "returnType": {"type": "number"},
    }
