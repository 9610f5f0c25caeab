from dataclasses import replace
from typing import Any, Dict, FrozenSet, List

from reactprops.log import get_logger
from reactprops.models import FunctionDeclaration, Result, TypeDeclaration, object_type

log = get_logger("resolver")

# reference keys that survive expanding a type_reference into an object
CARRIED_KEYS = ("optional", "defaultValue")


def index_types(types: List[TypeDeclaration]) -> Dict[str, TypeDeclaration]:
    by_name = {}
    for decl in types:
        by_name.setdefault(decl.name, decl)
    return by_name


def resolve_utility_types(result: Result) -> List[TypeDeclaration]:
    """
    Apply ``extends``, ``&``, ``Partial``, ``Pick`` and ``Omit`` to every
    declaration of ``result``.

    Bases are resolved before the declarations that use them regardless of
    the order they were declared in. A base that is part of an inheritance
    cycle is used as declared. Bases that can not be found leave the operator
    field set so the caller can tell the declaration is incomplete.
    """
    by_name = index_types(result.types)
    memo = {}
    active = set()

    def merge_bases(names):
        merged = {}
        missing = []
        for base_name in names:
            base = by_name.get(base_name)
            if base is None:
                log.warning("Base type not found: %s", base_name)
                missing.append(base_name)
                continue
            merged.update(resolve(base).props)
        return merged, missing or None

    def resolve(decl: TypeDeclaration) -> TypeDeclaration:
        key = id(decl)
        if key in memo:
            return memo[key]
        if key in active:
            log.info("Cyclic utility type: %s", decl.name)
            return decl
        if decl.is_resolved:
            memo[key] = decl
            return decl

        active.add(key)
        row = replace(decl, props=dict(decl.props))

        if decl.extended is not None:
            merged, row.extended = merge_bases(decl.extended)
            row.props = {**merged, **row.props}

        if decl.intersection_types is not None:
            merged, row.intersection_types = merge_bases(decl.intersection_types)
            row.props = {**merged, **row.props}

        if decl.partial is not None and decl.partial in by_name:
            base = resolve(by_name[decl.partial])
            row.props = {k: {**v, "optional": True} for k, v in base.props.items()}
            row.partial = None

        if decl.pick is not None and decl.pick.type_name in by_name:
            base = resolve(by_name[decl.pick.type_name])
            row.props = {k: base.props[k] for k in decl.pick.props if k in base.props}
            row.pick = None

        if decl.omit is not None and decl.omit.type_name in by_name:
            base = resolve(by_name[decl.omit.type_name])
            row.props = {k: v for k, v in base.props.items() if k not in decl.omit.props}
            row.omit = None

        active.discard(key)
        memo[key] = row
        log.debug("Resolved utility type: %s", decl.name)
        return row

    return [resolve(decl) for decl in result.types]


def resolve_props(props: Dict[str, Any], by_name, seen: FrozenSet[str]) -> Dict[str, Any]:
    if not props:
        return props
    resolved = {}
    changed = False
    for key, value in props.items():
        resolved[key] = resolve_prop_type(value, by_name, seen)
        changed = changed or resolved[key] is not value
    return resolved if changed else props


def resolve_reference(value, by_name, seen):
    if value.get("isGeneric") or value.get("circular"):
        return value
    name = value.get("typeName")
    if name in seen:
        log.info("Circular reference: %s", name)
        return {**value, "circular": True}
    decl = by_name.get(name)
    if decl is None:
        return value

    expanded = object_type(resolve_props(decl.props, by_name, seen | {name}), type_name=name)
    for key in CARRIED_KEYS:
        if key in value:
            expanded[key] = value[key]
    return expanded


def resolve_prop_type(value: Dict[str, Any], by_name, seen: FrozenSet[str]) -> Dict[str, Any]:
    """Expand the type references inside ``value``; unchanged parts are returned as-is."""
    kind = value.get("type")

    if kind == "type_reference":
        return resolve_reference(value, by_name, seen)

    if kind == "object":
        props = value.get("props")
        new_props = resolve_props(props, by_name, seen) if props is not None else None
        name = value.get("typeName")
        decl = by_name.get(name) if name else None
        if decl is not None and new_props and name not in seen:
            # destructured parameter: unknown members take their type from the named type
            referenced = resolve_props(decl.props, by_name, seen | {name})
            new_props = {
                key: {**member, **referenced[key]}
                if key in referenced and member.get("type") == "unknown" else member
                for key, member in new_props.items()
            }
        if new_props is props:
            return value
        return {**value, "props": new_props}

    if kind == "array":
        element = value.get("elementType")
        new_element = resolve_prop_type(element, by_name, seen) if element is not None else None
        return value if new_element is element else {**value, "elementType": new_element}

    if kind == "union":
        types = value.get("types", [])
        new_types = [resolve_prop_type(t, by_name, seen) for t in types]
        if all(a is b for a, b in zip(new_types, types)):
            return value
        return {**value, "types": new_types}

    if kind == "function":
        return_type = value.get("returnType")
        new_return = resolve_prop_type(return_type, by_name, seen) if return_type is not None else None
        params = value.get("parameters", [])
        new_params = [resolve_prop_type(p, by_name, seen) for p in params]
        if new_return is return_type and all(a is b for a, b in zip(new_params, params)):
            return value
        return {**value, "returnType": new_return, "parameters": new_params}

    return value


def resolve_types(result: Result) -> List[TypeDeclaration]:
    by_name = index_types(result.types)
    resolved = []
    for decl in result.types:
        props = resolve_props(decl.props, by_name, frozenset({decl.name}))
        resolved.append(decl if props is decl.props else replace(decl, props=props))
    return resolved


def resolve_functions(result: Result) -> List[FunctionDeclaration]:
    """Resolve argument and return types against ``result.types`` (already resolved)."""
    by_name = index_types(result.types)
    resolved = []
    for fn in result.functions:
        arguments = [resolve_prop_type(arg, by_name, frozenset()) for arg in fn.arguments]
        return_type = resolve_prop_type(fn.return_type, by_name, frozenset()) if fn.return_type else fn.return_type
        resolved.append(replace(fn, arguments=arguments, return_type=return_type))
    return resolved


def resolve_result(result: Result) -> Result:
    staged = replace(result, types=resolve_utility_types(result))
    staged = replace(staged, types=resolve_types(staged))
    return replace(staged, functions=resolve_functions(staged))
