"""
Failure levels reported by the Plugin Verifier.

Each level is recognized by a fixed marker text in the verifier's console
output. ``classify_output`` is the only place that inspects the text, so a
structured report parser can replace it without touching callers.
"""

from enum import Enum
from typing import FrozenSet, Iterable, Optional

from verifierkit.core.exceptions import ConfigError


class FailureLevel(Enum):
    """Report categories, in declaration order, with their marker texts."""

    COMPATIBILITY_WARNINGS = "Compatibility warnings"
    COMPATIBILITY_PROBLEMS = "Compatibility problems"
    DEPRECATED_API_USAGES = "Deprecated API usages"
    EXPERIMENTAL_API_USAGES = "Experimental API usages"
    INTERNAL_API_USAGES = "Internal API usages"
    OVERRIDE_ONLY_API_USAGES = "Override-only API usages"
    NON_EXTENDABLE_API_USAGES = "Non-extendable API usages"
    PLUGIN_STRUCTURE_WARNINGS = "Plugin structure warnings"
    MISSING_DEPENDENCIES = "Missing dependencies"
    INVALID_PLUGIN = (
        "The following files specified for the verification are not valid plugins"
    )
    NOT_DYNAMIC = "Plugin cannot be loaded/unloaded without IDE restart"

    @property
    def marker(self) -> str:
        return self.value


ALL_LEVELS: FrozenSet[FailureLevel] = frozenset(FailureLevel)
NO_LEVELS: FrozenSet[FailureLevel] = frozenset()
DEFAULT_LEVELS: FrozenSet[FailureLevel] = frozenset(
    {FailureLevel.COMPATIBILITY_PROBLEMS}
)


def classify_output(
    text: str, levels: Iterable[FailureLevel]
) -> Optional[FailureLevel]:
    """
    Find the configured failure level reported in verifier output.

    Levels are checked in declaration order, not in the order their markers
    appear in the text.

    Args:
        text: Captured verifier output
        levels: Levels treated as fatal

    Returns:
        First matching level, or None if the output passes

    Example:
        >>> classify_output("Compatibility problems (2)", {FailureLevel.COMPATIBILITY_PROBLEMS})
        <FailureLevel.COMPATIBILITY_PROBLEMS: 'Compatibility problems'>
    """
    fatal = set(levels)
    for level in FailureLevel:
        if level in fatal and level.marker in text:
            return level
    return None


def parse_failure_levels(names: Iterable[str]) -> FrozenSet[FailureLevel]:
    """
    Parse failure level names from configuration.

    Names are case-insensitive; ``ALL`` and ``NONE`` select every level or
    none.

    Raises:
        ConfigError: If a name is not a known failure level
    """
    result = set()
    for name in names:
        key = str(name).strip().upper().replace("-", "_")
        if key == "ALL":
            result.update(ALL_LEVELS)
        elif key == "NONE":
            continue
        elif key in FailureLevel.__members__:
            result.add(FailureLevel[key])
        else:
            valid = ", ".join(["ALL", "NONE"] + list(FailureLevel.__members__))
            raise ConfigError(f"Unknown failure level: {name} (expected one of {valid})")
    return frozenset(result)


__all__ = [
    "FailureLevel",
    "ALL_LEVELS",
    "NO_LEVELS",
    "DEFAULT_LEVELS",
    "classify_output",
    "parse_failure_levels",
]
