import os
from typing import Tuple

import tree_sitter_typescript
from tree_sitter import Language, Parser, Tree

from reactprops.log import get_logger

log = get_logger("parser")

TSX_LANGUAGE = Language(tree_sitter_typescript.language_tsx())
TS_LANGUAGE = Language(tree_sitter_typescript.language_typescript())

PLAIN_EXTENSIONS = (".ts", ".mts", ".cts")


class ReactPropsError(Exception):
    pass


class ParseError(ReactPropsError):
    def __init__(self, filename, line=None, column=None):
        self.filename = filename
        self.line = line
        self.column = column
        where = f" at {line}:{column}" if line is not None else ""
        super().__init__(f"Failed to parse {filename}{where}")


def get_file_extension(filename: str) -> str:
    return os.path.splitext(filename)[1].lower()


def get_dialect(filename: str) -> str:
    return "tsx" if get_file_extension(filename) == ".tsx" else "jsx"


def accepts_markup(filename: str) -> bool:
    return get_file_extension(filename) not in PLAIN_EXTENSIONS


def create_parser(filename: str) -> Parser:
    return Parser(TSX_LANGUAGE if accepts_markup(filename) else TS_LANGUAGE)


def find_first_error(node):
    if node.type == "ERROR" or node.is_missing:
        return node
    for child in node.children:
        if child.has_error or child.is_missing:
            found = find_first_error(child)
            if found is not None:
                return found
    return None


def parse_code(filename: str, code: str, strict: bool = True) -> Tuple[bytes, Tree]:
    log.info("Parsing %s (%s grammar)", filename, "tsx" if accepts_markup(filename) else "typescript")
    code_bytes = code.encode("utf-8")
    tree = create_parser(filename).parse(code_bytes)

    if strict and tree.root_node.has_error:
        bad = find_first_error(tree.root_node) or tree.root_node
        log.error("Failed to parse %s at %d:%d", filename, bad.start_point[0] + 1, bad.start_point[1] + 1)
        raise ParseError(filename, bad.start_point[0] + 1, bad.start_point[1] + 1)

    log.info("Code parsed successfully")
    return code_bytes, tree


def get_text(node, code: bytes) -> str:
    if node is None:
        return ""
    return code[node.start_byte:node.end_byte].decode("utf-8", errors="replace")
