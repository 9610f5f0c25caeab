import os
from dataclasses import dataclass, field
from typing import FrozenSet

MEMO_WRAPPERS = frozenset({"memo", "React.memo"})
FORWARD_REF_WRAPPERS = frozenset({"forwardRef", "React.forwardRef"})
FC_TYPE_NAMES = frozenset({"FC", "React.FC", "FunctionComponent", "React.FunctionComponent"})


def _env_flag(name, default):
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() not in ("0", "false", "no", "off")


@dataclass(frozen=True)
class ExtractorConfig:
    max_component_params: int = 3
    component_name_pattern: str = r"^[A-Z]"
    memo_wrappers: FrozenSet[str] = field(default=MEMO_WRAPPERS)
    forward_ref_wrappers: FrozenSet[str] = field(default=FORWARD_REF_WRAPPERS)
    fc_type_names: FrozenSet[str] = field(default=FC_TYPE_NAMES)
    strict_parse: bool = True

    @classmethod
    def from_env(cls):
        max_params = os.environ.get("REACTPROPS_MAX_PARAMS", "").strip()
        return cls(
            max_component_params=int(max_params) if max_params else 3,
            strict_parse=_env_flag("REACTPROPS_STRICT_PARSE", True),
        )


DEFAULT_CONFIG = ExtractorConfig()
