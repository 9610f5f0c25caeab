import json
from enum import Enum
from typing import Optional

import chardet

from reactprops.adapters.component_adapter import adapt_react_components
from reactprops.base.component_extractor import ComponentExtractor
from reactprops.config import DEFAULT_CONFIG, ExtractorConfig
from reactprops.log import get_logger
from reactprops.models import ReactFile, Result
from reactprops.parser import get_dialect, get_text, parse_code
from reactprops.resolver.type_resolver import resolve_result
from reactprops.extractors.function_extractor import FunctionExtractor
from reactprops.extractors.props_extractor import default_props_visitor
from reactprops.extractors.type_extractor import interface_visitor, named, type_alias_visitor

log = get_logger("index")
exports_log = get_logger("exports")

ANONYMOUS_DEFAULT = "AnonymousDefault"
VARIABLE_DECLARATIONS = ("lexical_declaration", "variable_declaration")


class NodeKind(Enum):
    INTERFACE = "interface_declaration"
    TYPE_ALIAS = "type_alias_declaration"
    EXPORT = "export_statement"
    LEXICAL = "lexical_declaration"
    VARIABLE = "variable_declaration"
    FUNCTION = "function_declaration"
    EXPRESSION = "expression_statement"


KIND_BY_NODE_TYPE = {kind.value: kind for kind in NodeKind}


def read_source(file_path: str) -> str:
    with open(file_path, "rb") as f:
        raw = f.read()
    guess = chardet.detect(raw)
    encoding = guess["encoding"] or "utf-8"
    return raw.decode(encoding, errors="replace")


def declared_names(declaration, code: bytes):
    if declaration.type in VARIABLE_DECLARATIONS:
        names = []
        for declarator in named(declaration):
            if declarator.type != "variable_declarator":
                continue
            name_node = declarator.child_by_field_name("name")
            if name_node is not None and name_node.type == "identifier":
                names.append(get_text(name_node, code))
        return names

    name_node = declaration.child_by_field_name("name")
    return [get_text(name_node, code)] if name_node is not None else []


def export_clause_names(clause, code: bytes):
    """``export { a, b as c }`` -> ["a", "c"]."""
    names = []
    for specifier in named(clause):
        if specifier.type != "export_specifier":
            continue
        exposed = specifier.child_by_field_name("alias")
        if exposed is None:
            exposed = specifier.child_by_field_name("name")
        if exposed is not None:
            names.append(get_text(exposed, code).strip("'\""))
    return names


class ReactComponentExtractor(ComponentExtractor):
    """
    Extracts the exported function components of one source unit and the
    props each of them accepts.

    One instance handles one unit at a time; the batch CLI creates one per task.
    """

    def __init__(self, config: Optional[ExtractorConfig] = None):
        self.config = config or DEFAULT_CONFIG
        self.code = b""
        self.functions = None
        self.react_file = None
        self.handlers = {
            NodeKind.INTERFACE: self.visit_interface,
            NodeKind.TYPE_ALIAS: self.visit_type_alias,
            NodeKind.EXPORT: self.visit_export,
            NodeKind.LEXICAL: self.visit_variable,
            NodeKind.VARIABLE: self.visit_variable,
            NodeKind.FUNCTION: self.visit_function,
            NodeKind.EXPRESSION: self.visit_expression,
        }

    def visit(self, result: Result, node):
        kind = KIND_BY_NODE_TYPE.get(node.type)
        if kind is None:
            return
        self.handlers[kind](result, node)

    def visit_interface(self, result: Result, node):
        interface_visitor(result, node, self.code)

    def visit_type_alias(self, result: Result, node):
        type_alias_visitor(result, node, self.code)

    def visit_variable(self, result: Result, node):
        self.functions.variable_visitor(result, node)

    def visit_function(self, result: Result, node):
        self.functions.function_visitor(result, node)

    def visit_expression(self, result: Result, node):
        default_props_visitor(result, node, self.code)

    def visit_export(self, result: Result, node):
        declaration = node.child_by_field_name("declaration")
        is_default = any(c.type == "default" for c in node.children)

        if is_default:
            value = node.child_by_field_name("value")
            if declaration is not None and declaration.child_by_field_name("name") is not None:
                result.default_export = get_text(declaration.child_by_field_name("name"), self.code)
            elif value is not None and value.type == "identifier":
                result.default_export = get_text(value, self.code)
            else:
                result.default_export = ANONYMOUS_DEFAULT
            exports_log.info("Found default export: %s", result.default_export)
        elif declaration is not None:
            names = declared_names(declaration, self.code)
            result.exported.extend(names)
            exports_log.info("Found export: %s", ", ".join(names))
        else:
            clause = next((c for c in node.children if c.type == "export_clause"), None)
            if clause is not None:
                names = export_clause_names(clause, self.code)
                result.exported.extend(names)
                exports_log.info("Found export clause: %s", ", ".join(names))

        if declaration is not None:
            self.visit(result, declaration)

    def collect(self, root, code: bytes) -> Result:
        self.code = code
        self.functions = FunctionExtractor(code, self.config)
        result = Result()
        for node in named(root):
            self.visit(result, node)
        return result

    def analyze(self, filename: str, code: str) -> ReactFile:
        code_bytes, tree = parse_code(filename, code, strict=self.config.strict_parse)
        result = resolve_result(self.collect(tree.root_node, code_bytes))
        components = adapt_react_components(result, self.config)
        log.info("%s: %d components", filename, len(components))

        self.react_file = ReactFile(type=get_dialect(filename), filename=filename, components=components)
        return self.react_file

    def process_file(self, file_path: str, filename: Optional[str] = None):
        code = read_source(file_path)
        return self.analyze(filename or file_path.replace("\\", "/"), code)

    def extract_all_components(self):
        if self.react_file is None:
            return []
        return [c.to_dict() for c in self.react_file.components]

    def write_to_file(self, output_path: str):
        if self.react_file is None:
            raise ValueError("Nothing extracted yet; call process_file first")
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(self.react_file.to_dict(), f, indent=2, ensure_ascii=False)
