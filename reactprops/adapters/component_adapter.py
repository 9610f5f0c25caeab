import copy
import re
from dataclasses import replace
from typing import Any, Dict, List, Optional

from reactprops.config import DEFAULT_CONFIG, ExtractorConfig
from reactprops.log import get_logger
from reactprops.models import (
    PRIMITIVE_TYPES,
    Alias,
    FunctionDeclaration,
    ReactComponent,
    Result,
    array_type,
    function_type,
    object_type,
    react_prop,
    unknown,
)

log = get_logger("index")

PROP_TYPES_KIND_MAP = {
    "bool": "boolean",
    "func": "function",
    "array": "array",
    "arrayof": "array",
    "object": "object",
    "shape": "object",
    "objectof": "object",
    "exact": "object",
}


def prop_type_for_kind(kind: str) -> Dict[str, Any]:
    """``PropTypes.<kind>`` -> PropType."""
    mapped = PROP_TYPES_KIND_MAP.get(kind, kind)
    if mapped == "function":
        return function_type(unknown(), [])
    if mapped == "array":
        return array_type(unknown())
    if mapped == "object":
        return object_type()
    if mapped in PRIMITIVE_TYPES:
        return {"type": mapped}
    return unknown()


def apply_prop_types(props: Dict[str, Any], prop_types: Dict[str, Dict[str, Any]]) -> Dict[str, Any]:
    for key, definition in prop_types.items():
        mapped = prop_type_for_kind(definition.get("type", "unknown"))
        optional = not definition.get("isRequired", False)
        existing = props.get(key)
        if existing is not None and existing.get("type") == mapped["type"]:
            props[key] = {**existing, "optional": optional}
        else:
            default_value = existing.get("defaultValue") if existing else None
            props[key] = react_prop(mapped, optional=optional, default_value=default_value)
    return props


def follow_alias(result: Result, alias: Alias) -> Optional[FunctionDeclaration]:
    seen = set()
    current = alias
    while current is not None and current.name not in seen:
        seen.add(current.name)
        fn = result.find_function(current.target)
        if fn is not None:
            return fn
        current = result.find_alias(current.target)
    return None


def expand_aliases(result: Result) -> List[FunctionDeclaration]:
    functions = list(result.functions)
    for alias in result.aliases:
        if result.find_function(alias.name) is not None:
            continue
        target = follow_alias(result, alias)
        if target is None:
            log.debug("Alias %s does not lead to a function", alias.name)
            continue
        functions.append(replace(target, name=alias.name))
    return functions


def is_component(fn: FunctionDeclaration, result: Result, config: ExtractorConfig) -> bool:
    return (
        re.match(config.component_name_pattern, fn.name) is not None
        and len(fn.arguments) < config.max_component_params
        and fn.name in result.exported
    )


def adapt_react_components(result: Result, config: ExtractorConfig = DEFAULT_CONFIG) -> List[ReactComponent]:
    components = []
    for fn in expand_aliases(result):
        if not is_component(fn, result, config):
            continue

        first = fn.arguments[0] if fn.arguments else {}
        props = copy.deepcopy(first.get("props") or {})
        if fn.prop_types:
            props = apply_prop_types(props, fn.prop_types)

        components.append(
            ReactComponent(
                name=fn.name,
                props=props,
                wrapper_fn=fn.wrapper_fn,
                default_props=copy.deepcopy(fn.default_props),
            )
        )
    return components
