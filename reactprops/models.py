from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

# PropType / ReactProp values are plain dicts keyed by "type" so they can be
# written to disk as-is. Build them through the helpers below.

PRIMITIVE_TYPES = ("string", "number", "boolean", "any", "unknown", "void", "null")

PROP_TYPE_TAGS = PRIMITIVE_TYPES + (
    "object",
    "type_reference",
    "array",
    "function",
    "union",
    "literal",
)


def primitive(tag: str) -> Dict[str, Any]:
    if tag not in PRIMITIVE_TYPES:
        raise ValueError(f"Not a primitive prop type: {tag}")
    return {"type": tag}


def unknown() -> Dict[str, Any]:
    return {"type": "unknown"}


def object_type(props: Optional[Dict[str, Any]] = None, type_name: Optional[str] = None) -> Dict[str, Any]:
    obj = {"type": "object"}
    if props is not None:
        obj["props"] = props
    if type_name:
        obj["typeName"] = type_name
    return obj


def type_reference(type_name: str, is_generic: bool = False) -> Dict[str, Any]:
    ref = {"type": "type_reference", "typeName": type_name}
    if is_generic:
        ref["isGeneric"] = True
    return ref


def array_type(element_type: Dict[str, Any]) -> Dict[str, Any]:
    return {"type": "array", "elementType": element_type}


def function_type(return_type: Dict[str, Any], parameters: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {"type": "function", "returnType": return_type, "parameters": parameters}


def union_type(types: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {"type": "union", "types": types}


def literal_type(literal_kind: str, value: Any) -> Dict[str, Any]:
    return {"type": "literal", "literal": {"type": literal_kind, "value": value}}


def react_prop(prop_type: Dict[str, Any], optional: bool = False, default_value: Optional[str] = None) -> Dict[str, Any]:
    prop = {**prop_type, "optional": optional}
    if default_value is not None:
        prop["defaultValue"] = default_value
    return prop


@dataclass
class UtilityPick:
    """Key selection for ``Pick<Base, K>`` / ``Omit<Base, K>``."""

    type_name: str
    props: List[str]

    def to_dict(self):
        return {"typeName": self.type_name, "props": list(self.props)}


@dataclass
class TypeDeclaration:
    name: str
    props: Dict[str, Any] = field(default_factory=dict)
    extended: Optional[List[str]] = None
    intersection_types: Optional[List[str]] = None
    partial: Optional[str] = None
    pick: Optional[UtilityPick] = None
    omit: Optional[UtilityPick] = None

    @property
    def is_resolved(self) -> bool:
        return (
            self.extended is None
            and self.intersection_types is None
            and self.partial is None
            and self.pick is None
            and self.omit is None
        )

    def to_dict(self):
        row = {"name": self.name, "props": self.props}
        if self.extended is not None:
            row["extended"] = list(self.extended)
        if self.intersection_types is not None:
            row["intersectionTypes"] = list(self.intersection_types)
        if self.partial is not None:
            row["partial"] = self.partial
        if self.pick is not None:
            row["pick"] = self.pick.to_dict()
        if self.omit is not None:
            row["omit"] = self.omit.to_dict()
        return row


@dataclass
class FunctionDeclaration:
    name: str
    arguments: List[Dict[str, Any]] = field(default_factory=list)
    return_type: Optional[Dict[str, Any]] = None
    wrapper_fn: Optional[str] = None
    generic_params: Optional[List[str]] = None
    default_props: Optional[Dict[str, Any]] = None
    prop_types: Optional[Dict[str, Dict[str, Any]]] = None

    def to_dict(self):
        row = {"name": self.name, "arguments": self.arguments}
        if self.return_type is not None:
            row["returnType"] = self.return_type
        if self.wrapper_fn:
            row["wrapperFn"] = self.wrapper_fn
        if self.generic_params:
            row["genericParams"] = list(self.generic_params)
        if self.default_props is not None:
            row["defaultProps"] = self.default_props
        if self.prop_types is not None:
            row["propTypes"] = self.prop_types
        return row


@dataclass
class Alias:
    name: str
    target: str
    wrapper_fn: Optional[str] = None

    def to_dict(self):
        row = {"name": self.name, "target": self.target}
        if self.wrapper_fn:
            row["wrapperFn"] = self.wrapper_fn
        return row


@dataclass
class Result:
    """Accumulator for one source unit, filled by the visitors."""

    types: List[TypeDeclaration] = field(default_factory=list)
    functions: List[FunctionDeclaration] = field(default_factory=list)
    aliases: List[Alias] = field(default_factory=list)
    exported: List[str] = field(default_factory=list)
    default_export: Optional[str] = None

    def find_type(self, name: str) -> Optional[TypeDeclaration]:
        for decl in self.types:
            if decl.name == name:
                return decl
        return None

    def find_function(self, name: str) -> Optional[FunctionDeclaration]:
        for fn in self.functions:
            if fn.name == name:
                return fn
        return None

    def find_alias(self, name: str) -> Optional[Alias]:
        for alias in self.aliases:
            if alias.name == name:
                return alias
        return None


@dataclass(frozen=True)
class ReactComponent:
    name: str
    props: Dict[str, Any]
    wrapper_fn: Optional[str] = None
    default_props: Optional[Dict[str, Any]] = None

    def to_dict(self):
        row = {"name": self.name, "props": self.props}
        if self.wrapper_fn:
            row["wrapperFn"] = self.wrapper_fn
        if self.default_props is not None:
            row["defaultProps"] = self.default_props
        return row


@dataclass(frozen=True)
class ReactFile:
    type: str
    filename: str
    components: List[ReactComponent]

    def to_dict(self):
        return {
            "type": self.type,
            "filename": self.filename,
            "components": [c.to_dict() for c in self.components],
        }
