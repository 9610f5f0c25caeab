from typing import Any, Dict, Optional

from reactprops.log import get_logger
from reactprops.models import Result, object_type, react_prop, unknown
from reactprops.parser import get_text
from reactprops.extractors.type_extractor import named, parse_number, string_value

log = get_logger("props")

# marks "no constant value", distinct from a JS null (None)
UNDEFINED = object()


def format_number(value) -> str:
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value)


def negated_number(node, code: bytes):
    operator = node.child_by_field_name("operator")
    argument = node.child_by_field_name("argument")
    if operator is None or argument is None or argument.type != "number":
        return None
    value = parse_number(get_text(argument, code))
    if value is None:
        return None
    op = get_text(operator, code)
    if op == "-":
        return -value
    if op == "+":
        return value
    return None


def serialize_default_value(node, code: bytes) -> Optional[str]:
    """
    Render a destructuring default the way it reads in source:
    strings double-quoted, ``{ key: value }`` objects, ``[a, b]`` arrays.
    Returns None for anything that is not a literal.
    """
    if node is None:
        return None
    kind = node.type

    if kind == "parenthesized_expression":
        inner = named(node)
        return serialize_default_value(inner[0], code) if inner else None
    if kind == "string":
        return f'"{string_value(node, code)}"'
    if kind == "number":
        value = parse_number(get_text(node, code))
        return format_number(value) if value is not None else None
    if kind == "unary_expression":
        value = negated_number(node, code)
        return format_number(value) if value is not None else None
    if kind in ("true", "false"):
        return kind

    if kind == "object":
        entries = []
        for prop in named(node):
            if prop.type != "pair":
                continue
            key = prop.child_by_field_name("key")
            if key is None or key.type != "property_identifier":
                continue
            value = serialize_default_value(prop.child_by_field_name("value"), code)
            entries.append(f"{get_text(key, code)}: {value if value is not None else 'undefined'}")
        return "{ " + ", ".join(entries) + " }"

    if kind == "array":
        elements = [serialize_default_value(e, code) for e in named(node)]
        return "[" + ", ".join(e for e in elements if e) + "]"

    return None


def evaluate_constant(node, code: bytes) -> Any:
    if node is None:
        return UNDEFINED
    kind = node.type

    if kind == "parenthesized_expression":
        inner = named(node)
        return evaluate_constant(inner[0], code) if inner else UNDEFINED
    if kind == "string":
        return string_value(node, code)
    if kind == "number":
        value = parse_number(get_text(node, code))
        return UNDEFINED if value is None else value
    if kind == "unary_expression":
        value = negated_number(node, code)
        return UNDEFINED if value is None else value
    if kind in ("true", "false"):
        return kind == "true"
    if kind == "null":
        return None

    if kind == "object":
        obj = {}
        for prop in named(node):
            if prop.type != "pair":
                continue
            key = prop.child_by_field_name("key")
            if key is None or key.type != "property_identifier":
                continue
            value = evaluate_constant(prop.child_by_field_name("value"), code)
            if value is not UNDEFINED:
                obj[get_text(key, code)] = value
        return obj

    if kind == "array":
        values = [evaluate_constant(e, code) for e in named(node)]
        return [None if v is UNDEFINED else v for v in values]

    return UNDEFINED


def prop_type_from_member(node, code: bytes) -> Dict[str, Any]:
    is_required = False
    prop = node.child_by_field_name("property")
    if prop is not None and get_text(prop, code) == "isRequired":
        is_required = True
        node = node.child_by_field_name("object")

    # PropTypes.arrayOf(PropTypes.string).isRequired
    if node is not None and node.type == "call_expression":
        node = node.child_by_field_name("function")

    if node is None or node.type != "member_expression":
        return {"type": "unknown", "isRequired": False}

    obj = node.child_by_field_name("object")
    kind = node.child_by_field_name("property")
    if obj is not None and obj.type == "identifier" and get_text(obj, code) == "PropTypes" and kind is not None:
        return {"type": get_text(kind, code).lower(), "isRequired": is_required}

    return {"type": "unknown", "isRequired": False}


def extract_prop_type_definition(node, code: bytes) -> Dict[str, Any]:
    if node is not None and node.type == "member_expression":
        return prop_type_from_member(node, code)
    if node is not None and node.type == "call_expression":
        callee = node.child_by_field_name("function")
        if callee is not None and callee.type == "member_expression":
            return prop_type_from_member(callee, code)
    return {"type": "unknown", "isRequired": False}


def static_assignment_target(node, code: bytes):
    """``Name.defaultProps = {...}`` -> ("Name", "defaultProps", <object node>)."""
    inner = named(node)
    if not inner or inner[0].type != "assignment_expression":
        return None
    assignment = inner[0]
    left = assignment.child_by_field_name("left")
    right = assignment.child_by_field_name("right")
    if left is None or left.type != "member_expression":
        return None
    obj = left.child_by_field_name("object")
    prop = left.child_by_field_name("property")
    if obj is None or prop is None or obj.type != "identifier" or prop.type != "property_identifier":
        return None
    return get_text(obj, code), get_text(prop, code), right


def default_props_visitor(result: Result, node, code: bytes):
    target = static_assignment_target(node, code)
    if target is None:
        return
    component_name, member, value = target
    if member not in ("defaultProps", "propTypes") or value is None or value.type != "object":
        return

    fn = result.find_function(component_name)
    if fn is None:
        log.info("Skipping %s for unknown component %s", member, component_name)
        return

    if member == "defaultProps":
        default_props = {}
        for prop in named(value):
            if prop.type != "pair":
                continue
            key = prop.child_by_field_name("key")
            if key is None or key.type != "property_identifier":
                continue
            evaluated = evaluate_constant(prop.child_by_field_name("value"), code)
            if evaluated is not UNDEFINED:
                default_props[get_text(key, code)] = evaluated
        log.info("Found defaultProps for %s: %s", component_name, default_props)
        fn.default_props = default_props
        return

    prop_types = {}
    for prop in named(value):
        if prop.type != "pair":
            log.debug("Skipping propTypes entry %s", prop.type)
            continue
        key = prop.child_by_field_name("key")
        if key is None or key.type != "property_identifier":
            continue
        prop_types[get_text(key, code)] = extract_prop_type_definition(prop.child_by_field_name("value"), code)

    log.info("Found propTypes for %s: %s", component_name, prop_types)
    if prop_types:
        fn.prop_types = prop_types


def scan_props_usage(node, props_name: Optional[str], code: bytes) -> Dict[str, Any]:
    """
    Collect ``props.a.b`` access chains rooted at ``props_name`` inside ``node``.

    Returns a tree where a dict means "accessed further" and None is a leaf:
    ``props.a; props.b.c`` -> {"a": None, "b": {"c": None}}
    """
    tree = {}
    if not props_name:
        return tree

    def record(path):
        current = tree
        for index, prop in enumerate(path):
            last = index == len(path) - 1
            if prop not in current or (current[prop] is None and not last):
                current[prop] = None if last else {}
            if current[prop] is None:
                break
            current = current[prop]

    stack = [node]
    while stack:
        n = stack.pop()
        if n.type == "member_expression":
            path = []
            current = n
            while current is not None and current.type == "member_expression":
                prop = current.child_by_field_name("property")
                if prop is not None and prop.type == "property_identifier":
                    path.insert(0, get_text(prop, code))
                current = current.child_by_field_name("object")
            if current is not None and current.type == "identifier" and get_text(current, code) == props_name and path:
                record(path)
        stack.extend(reversed(n.children))

    return tree


def convert_prop_tree_to_react_props(tree: Dict[str, Any]) -> Dict[str, Any]:
    props = {}
    for key, value in tree.items():
        if value is not None:
            props[key] = react_prop(object_type(convert_prop_tree_to_react_props(value)))
        else:
            props[key] = react_prop(unknown())
    return props
