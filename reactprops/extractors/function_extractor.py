from typing import Any, Dict, List, Optional, Sequence

from reactprops.config import DEFAULT_CONFIG, ExtractorConfig
from reactprops.log import get_logger
from reactprops.models import (
    Alias,
    FunctionDeclaration,
    Result,
    array_type,
    object_type,
    react_prop,
    type_reference,
    unknown,
)
from reactprops.parser import get_text
from reactprops.extractors.props_extractor import (
    convert_prop_tree_to_react_props,
    scan_props_usage,
    serialize_default_value,
)
from reactprops.extractors.type_extractor import (
    extract_members,
    extract_prop_type,
    named,
    type_arguments_of,
    type_name_of,
    unwrap_annotation,
)

log = get_logger("function")
variables_log = get_logger("variables")

FUNCTION_EXPRESSIONS = ("arrow_function", "function_expression", "function")
JSX_NODES = ("jsx_element", "jsx_self_closing_element", "jsx_fragment")
PARAMETER_NODES = ("required_parameter", "optional_parameter")
# keys a parameter keeps when its type is replaced by a wrapper's type argument
EXTENSION_KEYS = ("name", "optional", "defaultValue")

JSX_ELEMENT = "JSX.Element"


def retype(arg: Dict[str, Any], new_type: Dict[str, Any]) -> Dict[str, Any]:
    kept = {k: arg[k] for k in EXTENSION_KEYS if k in arg}
    return {**new_type, **kept}


def unwrap_parens(node):
    while node is not None and node.type == "parenthesized_expression":
        inner = named(node)
        node = inner[0] if inner else None
    return node


def callee_name(node, code: bytes) -> Optional[str]:
    """``memo`` / ``React.memo`` / ``a.b.c``; None for anything else."""
    if node is None:
        return None
    if node.type == "identifier":
        return get_text(node, code)
    if node.type == "member_expression":
        obj = callee_name(node.child_by_field_name("object"), code)
        prop = node.child_by_field_name("property")
        if obj and prop is not None and prop.type == "property_identifier":
            return f"{obj}.{get_text(prop, code)}"
    return None


def first_argument(call_node):
    args = call_node.child_by_field_name("arguments")
    if args is None or args.type != "arguments":
        return None
    inner = named(args)
    return inner[0] if inner else None


def extract_generic_params(node, code: bytes) -> List[str]:
    type_params = node.child_by_field_name("type_parameters")
    if type_params is None:
        return []
    names = []
    for param in named(type_params):
        if param.type != "type_parameter":
            continue
        name_node = param.child_by_field_name("name")
        if name_node is None:
            name_node = next((c for c in param.children if c.type == "type_identifier"), None)
        if name_node is not None:
            names.append(get_text(name_node, code))
    return names


def parameter_nodes(fn_node) -> List[Any]:
    params = fn_node.child_by_field_name("parameters")
    if params is not None:
        return [p for p in named(params) if p.type in PARAMETER_NODES]
    single = fn_node.child_by_field_name("parameter")
    return [single] if single is not None else []


def extract_object_pattern_props(pattern, code: bytes) -> Dict[str, Any]:
    properties = {}
    for child in named(pattern):
        default_node = None
        if child.type == "shorthand_property_identifier_pattern":
            key = get_text(child, code)
        elif child.type == "object_assignment_pattern":
            left = child.child_by_field_name("left")
            if left is None or left.type != "shorthand_property_identifier_pattern":
                continue
            key = get_text(left, code)
            default_node = child.child_by_field_name("right")
        elif child.type == "pair_pattern":
            key_node = child.child_by_field_name("key")
            if key_node is None or key_node.type != "property_identifier":
                continue
            key = get_text(key_node, code)
            value = child.child_by_field_name("value")
            if value is not None and value.type == "assignment_pattern":
                default_node = value.child_by_field_name("right")
        else:
            continue

        default_value = serialize_default_value(default_node, code)
        properties[key] = react_prop(unknown(), default_value=default_value)
        if default_value is not None:
            log.debug("default value: %s %s", key, default_value)
    return properties


def extract_parameter_type(param, code: bytes, generic_params: Sequence[str] = ()) -> Dict[str, Any]:
    if param is None:
        return unknown()

    # single bare arrow parameter: props => ...
    if param.type == "identifier":
        return {"type": "unknown", "name": get_text(param, code)}

    pattern = param.child_by_field_name("pattern")
    type_node = unwrap_annotation(param.child_by_field_name("type"))

    if pattern is None:
        return unknown()

    if pattern.type == "identifier":
        name = get_text(pattern, code)
        if type_node is not None:
            return {**extract_prop_type(type_node, code, generic_params), "name": name}
        return {"type": "unknown", "name": name}

    if pattern.type == "object_pattern":
        properties = extract_object_pattern_props(pattern, code)
        if type_node is None:
            return object_type(properties)

        ref_name = type_name_of(type_node, code)
        if ref_name:
            return object_type(properties, type_name=ref_name)

        if type_node.type == "object_type":
            for key, member in extract_members(type_node, code, generic_params).items():
                default_value = properties.get(key, {}).get("defaultValue")
                properties[key] = member if default_value is None else {**member, "defaultValue": default_value}
            return object_type(properties)

        return object_type(properties)

    if pattern.type == "array_pattern":
        return array_type(unknown())

    return unknown()


def find_return_statement(node):
    if node.type == "return_statement":
        return node
    if node.type == "statement_block":
        for statement in named(node):
            found = find_return_statement(statement)
            if found is not None:
                return found
    return None


def infer_type_from_expression(expression) -> Dict[str, Any]:
    expression = unwrap_parens(expression)
    if expression is None:
        return unknown()
    kind = expression.type
    if kind in JSX_NODES:
        return type_reference(JSX_ELEMENT)
    if kind == "object":
        return object_type()
    if kind == "array":
        return array_type(unknown())
    if kind == "string":
        return {"type": "string"}
    if kind == "number":
        return {"type": "number"}
    if kind in ("true", "false"):
        return {"type": "boolean"}
    return unknown()


def infer_return_type(body) -> Dict[str, Any]:
    if body is None:
        return {"type": "void"}
    # implicit return of an arrow function
    if body.type != "statement_block":
        return infer_type_from_expression(body)

    statement = find_return_statement(body)
    argument = named(statement) if statement is not None else []
    if not argument:
        return {"type": "void"}
    return infer_type_from_expression(argument[0])


class FunctionExtractor:
    """Builds FunctionDeclarations and Aliases from module level declarations."""

    def __init__(self, code: bytes, config: ExtractorConfig = DEFAULT_CONFIG):
        self.code = code
        self.config = config

    def get_text(self, node) -> str:
        return get_text(node, self.code)

    def extract_return_type(self, fn_node, generic_params):
        annotation = fn_node.child_by_field_name("return_type")
        if annotation is not None:
            return extract_prop_type(annotation, self.code, generic_params)
        return infer_return_type(fn_node.child_by_field_name("body"))

    def scan_props(self, fn: FunctionDeclaration, fn_node) -> FunctionDeclaration:
        if len(fn.arguments) != 1 or fn.arguments[0].get("type") != "unknown":
            return fn

        body = fn_node.child_by_field_name("body")
        if body is None:
            body = fn_node
        props_tree = scan_props_usage(body, fn.arguments[0].get("name"), self.code)
        used_props = convert_prop_tree_to_react_props(props_tree)
        if used_props:
            fn.arguments = [{**fn.arguments[0], "type": "object", "props": used_props}]
        return fn

    def function_visitor(self, result: Result, node):
        name_node = node.child_by_field_name("name")
        if name_node is None:
            return
        name = self.get_text(name_node)
        generic_params = extract_generic_params(node, self.code)
        args = [extract_parameter_type(p, self.code, generic_params) for p in parameter_nodes(node)]

        row = FunctionDeclaration(
            name=name,
            arguments=args,
            return_type=self.extract_return_type(node, generic_params),
        )
        if generic_params:
            row.generic_params = generic_params

        result.functions.append(self.scan_props(row, node))
        log.info("Found function: %s", name)

    def detect_fc_type(self, declarator) -> Optional[str]:
        """``const X: React.FC<Props> = ...`` -> "Props"."""
        annotation = unwrap_annotation(declarator.child_by_field_name("type"))
        if annotation is None or annotation.type != "generic_type":
            return None
        if type_name_of(annotation, self.code) not in self.config.fc_type_names:
            return None
        args = type_arguments_of(annotation)
        if not args:
            return None
        return type_name_of(args[0], self.code)

    def extract_function_expression(self, result: Result, name: str, declarator, fn_node) -> FunctionDeclaration:
        params = parameter_nodes(fn_node)

        fc_type_name = self.detect_fc_type(declarator)
        if fc_type_name and result.find_type(fc_type_name) is not None:
            variables_log.info("Found React.FC<%s> arrow function: %s", fc_type_name, name)
            if params:
                props_arg = extract_parameter_type(params[0], self.code)
            else:
                props_arg = type_reference(fc_type_name)
            if props_arg.get("type") == "object":
                props_arg = {**props_arg, "typeName": fc_type_name}
            elif props_arg.get("type") == "unknown":
                props_arg = retype(props_arg, type_reference(fc_type_name))
            return FunctionDeclaration(
                name=name,
                arguments=[props_arg],
                return_type=type_reference(JSX_ELEMENT),
            )

        generic_params = extract_generic_params(fn_node, self.code)
        fn = FunctionDeclaration(
            name=name,
            arguments=[extract_parameter_type(p, self.code, generic_params) for p in params],
            return_type=self.extract_return_type(fn_node, generic_params),
        )
        if generic_params:
            fn.generic_params = generic_params
        variables_log.info("Found arrow function: %s", name)
        return fn

    def wrapper_type_argument(self, type_node) -> Dict[str, Any]:
        name = type_name_of(type_node, self.code)
        if name:
            return type_reference(name)
        if type_node is not None and type_node.type == "object_type":
            return object_type(extract_members(type_node, self.code))
        return unknown()

    def process_forward_ref(self, fn: FunctionDeclaration, call_node) -> FunctionDeclaration:
        if fn.wrapper_fn not in self.config.forward_ref_wrappers:
            return fn
        type_args = type_arguments_of(call_node)
        if not type_args or not type_name_of(type_args[0], self.code):
            return fn

        variables_log.info("Processing %s<%s>", fn.wrapper_fn, fn.name)
        ref_type = type_reference(type_name_of(type_args[0], self.code))
        props_type = self.wrapper_type_argument(type_args[1]) if len(type_args) > 1 else unknown()

        arguments = list(fn.arguments)
        while len(arguments) < 2:
            arguments.append({})
        props_arg, ref_arg = arguments[0], arguments[1]

        arguments[1] = retype(ref_arg, ref_type)

        if props_arg.get("type") == "object":
            if props_type["type"] == "type_reference":
                arguments[0] = {**props_arg, "typeName": props_type["typeName"]}
            elif props_type["type"] == "object":
                arguments[0] = {**props_arg, "props": {**props_arg.get("props", {}), **props_type.get("props", {})}}
        elif props_type["type"] != "unknown" or not props_arg:
            arguments[0] = retype(props_arg, props_type)

        fn.arguments = arguments
        return fn

    def process_memo_type(self, fn: FunctionDeclaration, call_node) -> FunctionDeclaration:
        if fn.wrapper_fn not in self.config.memo_wrappers:
            return fn
        type_args = type_arguments_of(call_node)
        if not type_args or not fn.arguments:
            return fn

        props_type = self.wrapper_type_argument(type_args[0])
        variables_log.info("Processing %s<%s>: %s", fn.wrapper_fn, fn.name, props_type["type"])
        props_arg = fn.arguments[0]

        if props_type["type"] == "type_reference":
            if props_arg.get("type") == "object" and "name" not in props_arg:
                # destructured parameter: keep its members and defaults
                replaced = {**props_arg, "typeName": props_type["typeName"]}
            else:
                replaced = retype(props_arg, props_type)
        elif props_type["type"] == "object":
            replaced = retype(props_arg, props_type)
        else:
            return fn

        fn.arguments = [replaced] + list(fn.arguments[1:])
        return fn

    def variable_visitor(self, result: Result, node):
        for declarator in named(node):
            if declarator.type != "variable_declarator":
                continue
            name_node = declarator.child_by_field_name("name")
            value = unwrap_parens(declarator.child_by_field_name("value"))
            if name_node is None or name_node.type != "identifier" or value is None:
                continue
            name = self.get_text(name_node)

            wrapper_fn = None
            target = value
            if value.type == "call_expression":
                wrapper_fn = callee_name(value.child_by_field_name("function"), self.code)
                target = unwrap_parens(first_argument(value))
                if wrapper_fn is None or target is None:
                    variables_log.debug("Skipping call initializer of %s", name)
                    continue

            if target.type in FUNCTION_EXPRESSIONS:
                fn = self.extract_function_expression(result, name, declarator, target)
                if wrapper_fn:
                    variables_log.info("Function has wrapper: %s %s", name, wrapper_fn)
                    fn.wrapper_fn = wrapper_fn
                    fn = self.process_forward_ref(fn, value)
                    fn = self.process_memo_type(fn, value)
                result.functions.append(self.scan_props(fn, target))
                continue

            if target.type == "identifier":
                result.aliases.append(Alias(name=name, target=self.get_text(target), wrapper_fn=wrapper_fn))
                variables_log.info("Found alias: %s -> %s", name, self.get_text(target))
