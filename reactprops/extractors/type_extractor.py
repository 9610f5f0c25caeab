from typing import Any, Dict, List, Optional, Sequence

from reactprops.log import get_logger
from reactprops.models import (
    Result,
    TypeDeclaration,
    UtilityPick,
    array_type,
    function_type,
    literal_type,
    object_type,
    react_prop,
    type_reference,
    union_type,
    unknown,
)
from reactprops.parser import get_text

log = get_logger("props")
interface_log = get_logger("interface")

PREDEFINED_TYPES = {"string", "number", "boolean", "any", "unknown", "void"}
ARRAY_GENERICS = {"Array", "ReadonlyArray"}
TYPE_NAME_NODES = ("type_identifier", "nested_type_identifier", "identifier")
MEMBER_NAME_NODES = ("property_identifier", "identifier")


def named(node) -> List[Any]:
    return [c for c in node.named_children if c.type != "comment"]


def has_token(node, token: str) -> bool:
    return any(not c.is_named and c.type == token for c in node.children)


def unwrap_annotation(node):
    """``: T`` -> ``T``."""
    if node is not None and node.type in ("type_annotation", "opting_type_annotation", "omitting_type_annotation"):
        inner = named(node)
        return inner[0] if inner else None
    return node


def string_value(node, code: bytes) -> str:
    text = get_text(node, code)
    if len(text) >= 2 and text[0] in "'\"`" and text[-1] == text[0]:
        return text[1:-1]
    return text


def parse_number(text: str):
    raw = text.replace("_", "").rstrip("n")
    try:
        if raw[:2].lower() in ("0x", "0o", "0b"):
            return int(raw, 0)
        value = float(raw)
    except ValueError:
        return None
    if value.is_integer() and abs(value) < 2 ** 53:
        return int(value)
    return value


def qualified_name(node, code: bytes) -> str:
    # React . ReactNode -> React.ReactNode
    return "".join(get_text(node, code).split())


def type_name_of(node, code: bytes) -> Optional[str]:
    """Name of a referenced type: ``Props``, ``Props<T>``, ``React.FC<P>``."""
    if node is None:
        return None
    if node.type in TYPE_NAME_NODES:
        return qualified_name(node, code)
    if node.type == "generic_type":
        return type_name_of(node.child_by_field_name("name"), code)
    return None


def type_arguments_of(node) -> List[Any]:
    if node is None:
        return []
    args = node.child_by_field_name("type_arguments")
    if args is None:
        args = next((c for c in node.children if c.type == "type_arguments"), None)
    return named(args) if args is not None else []


def flatten_operands(node, kind: str) -> List[Any]:
    """``A | B | C`` is parsed left-nested; return the operands in source order."""
    operands = []
    for child in named(node):
        if child.type == kind:
            operands.extend(flatten_operands(child, kind))
        else:
            operands.append(child)
    return operands


def extract_literal(node, code: bytes) -> Dict[str, Any]:
    inner = named(node)
    if not inner:
        return unknown()
    lit = inner[0]
    if lit.type == "string":
        return literal_type("string", string_value(lit, code))
    if lit.type == "number":
        return literal_type("number", parse_number(get_text(lit, code)))
    if lit.type == "unary_expression":
        value = parse_number(get_text(lit, code).lstrip("-+ \t"))
        if value is not None and get_text(lit, code).lstrip().startswith("-"):
            value = -value
        return literal_type("number", value)
    if lit.type in ("true", "false"):
        return literal_type("boolean", lit.type == "true")
    if lit.type == "null":
        return {"type": "null"}
    return unknown()


def extract_prop_type(node, code: bytes, generic_params: Sequence[str] = ()) -> Dict[str, Any]:
    """
    Recursively determine the PropType of a type node.

    > string[]              {"type": "array", "elementType": {"type": "string"}}
    > (x: number) => void   {"type": "function", "returnType": {"type": "void"},
                             "parameters": [{"type": "number", "name": "x"}]}
    """
    node = unwrap_annotation(node)
    if node is None:
        log.debug("Unknown type: no type node")
        return unknown()

    kind = node.type

    if kind in ("parenthesized_type", "readonly_type"):
        inner = named(node)
        return extract_prop_type(inner[-1], code, generic_params) if inner else unknown()

    if kind == "predefined_type":
        text = get_text(node, code).strip()
        if text in PREDEFINED_TYPES:
            return {"type": text}
        return unknown()

    if kind == "array_type":
        inner = named(node)
        element = extract_prop_type(inner[0], code, generic_params) if inner else unknown()
        return array_type(element)

    if kind == "function_type":
        params_node = node.child_by_field_name("parameters")
        return_node = node.child_by_field_name("return_type")
        if return_node is None:
            rest = named(node)
            return_node = rest[-1] if rest else None
        return function_type(
            extract_prop_type(return_node, code, generic_params),
            extract_function_parameters(params_node, code, generic_params),
        )

    if kind == "union_type":
        return union_type([extract_prop_type(t, code, generic_params) for t in flatten_operands(node, "union_type")])

    if kind == "literal_type":
        return extract_literal(node, code)

    if kind == "generic_type":
        name = type_name_of(node, code)
        args = type_arguments_of(node)
        if name in ARRAY_GENERICS and len(args) == 1:
            return array_type(extract_prop_type(args[0], code, generic_params))
        if name:
            return type_reference(name, is_generic=name in generic_params)

    if kind in TYPE_NAME_NODES:
        name = qualified_name(node, code)
        log.debug("TS type reference: %s", name)
        return type_reference(name, is_generic=name in generic_params)

    if kind == "object_type":
        return object_type(extract_members(node, code, generic_params))

    log.debug("Can not extract property type: %s", kind)
    return unknown()


def extract_function_parameter_type(param, code: bytes, generic_params: Sequence[str] = ()) -> Dict[str, Any]:
    pattern = param.child_by_field_name("pattern")
    annotation = param.child_by_field_name("type")
    if pattern is None:
        inner = named(param)
        pattern = inner[0] if inner else None

    name = ""
    param_type = unknown()

    if pattern is None:
        pass
    elif pattern.type == "identifier":
        name = get_text(pattern, code)
        if annotation is not None:
            param_type = extract_prop_type(annotation, code, generic_params)
    elif pattern.type == "rest_pattern":
        ident = next((c for c in named(pattern) if c.type == "identifier"), None)
        name = get_text(ident, code) if ident is not None else ""
        if annotation is not None:
            rest_type = extract_prop_type(annotation, code, generic_params)
            param_type = rest_type if rest_type["type"] == "array" else array_type(rest_type)
    elif pattern.type == "array_pattern":
        name = "arrayParam"
        param_type = array_type(unknown())
    elif pattern.type == "object_pattern":
        name = "objectParam"
        param_type = object_type()

    return {**param_type, "name": name}


def extract_function_parameters(params_node, code: bytes, generic_params: Sequence[str] = ()) -> List[Dict[str, Any]]:
    if params_node is None:
        return []
    return [
        extract_function_parameter_type(p, code, generic_params)
        for p in named(params_node)
        if p.type in ("required_parameter", "optional_parameter")
    ]


def member_name(member, code: bytes) -> Optional[str]:
    name_node = member.child_by_field_name("name")
    if name_node is None or name_node.type not in MEMBER_NAME_NODES:
        return None
    return get_text(name_node, code)


def extract_members(node, code: bytes, generic_params: Sequence[str] = ()) -> Dict[str, Any]:
    """Members of an object type or interface body as ReactProps."""
    props = {}
    for member in named(node):
        if member.type == "property_signature":
            name = member_name(member, code)
            annotation = member.child_by_field_name("type")
            if not name or annotation is None:
                continue
            props[name] = react_prop(extract_prop_type(annotation, code, generic_params), optional=has_token(member, "?"))
        elif member.type == "method_signature":
            name = member_name(member, code)
            if not name:
                continue
            method = function_type(
                extract_prop_type(member.child_by_field_name("return_type"), code, generic_params),
                extract_function_parameters(member.child_by_field_name("parameters"), code, generic_params),
            )
            props[name] = react_prop(method, optional=has_token(member, "?"))
    return props


def extract_string_keys(node, code: bytes) -> List[str]:
    """``'a'`` or ``'a' | 'b'`` -> ["a", "b"]."""
    node = unwrap_annotation(node)
    if node is None:
        return []
    if node.type == "literal_type":
        lit = named(node)
        if lit and lit[0].type == "string":
            return [string_value(lit[0], code)]
        return []
    if node.type == "union_type":
        keys = []
        for operand in flatten_operands(node, "union_type"):
            keys.extend(extract_string_keys(operand, code))
        return keys
    if node.type == "parenthesized_type":
        inner = named(node)
        return extract_string_keys(inner[0], code) if inner else []
    return []


def utility_type_fields(value, code: bytes) -> Dict[str, Any]:
    """Unresolved utility operator fields for the right-hand side of a type alias."""
    if value is None:
        return {}

    if value.type == "intersection_type":
        names = []
        for operand in flatten_operands(value, "intersection_type"):
            name = type_name_of(operand, code)
            if name:
                names.append(name)
        return {"intersection_types": names}

    if value.type != "generic_type":
        return {}

    name = type_name_of(value, code)
    args = type_arguments_of(value)

    if name == "Partial" and len(args) == 1:
        base = type_name_of(args[0], code)
        if base:
            return {"partial": base}

    if name in ("Pick", "Omit") and len(args) == 2:
        base = type_name_of(args[0], code)
        keys = extract_string_keys(args[1], code)
        if base and keys:
            return {name.lower(): UtilityPick(type_name=base, props=keys)}

    return {}


def extended_interface_names(node, code: bytes) -> List[str]:
    names = []
    for child in node.children:
        if child.type != "extends_type_clause":
            continue
        for base in named(child):
            name = type_name_of(base, code)
            if name:
                names.append(name)
    return names


def interface_visitor(result: Result, node, code: bytes):
    name = get_text(node.child_by_field_name("name"), code)
    body = node.child_by_field_name("body")
    if body is None:
        body = next((c for c in node.children if c.type in ("interface_body", "object_type")), None)

    row = TypeDeclaration(name=name, props=extract_members(body, code) if body is not None else {})
    ext = extended_interface_names(node, code)
    if ext:
        row.extended = ext

    result.types.append(row)
    interface_log.info("Found interface: %s", name)


def type_alias_visitor(result: Result, node, code: bytes):
    name = get_text(node.child_by_field_name("name"), code)
    value = node.child_by_field_name("value")

    props = {}
    if value is not None and value.type == "object_type":
        props = extract_members(value, code)
    elif value is not None and value.type == "intersection_type":
        for operand in flatten_operands(value, "intersection_type"):
            if operand.type == "object_type":
                props.update(extract_members(operand, code))

    row = TypeDeclaration(name=name, props=props, **utility_type_fields(value, code))
    result.types.append(row)
    interface_log.info("Found type alias: %s", name)
