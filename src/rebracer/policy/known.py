"""Built-in knowledge about which settings sections are safe to share.

Settings files are often committed alongside a solution, so anything
loaded from them must be treated as untrusted input. Some options pages
can be abused from such a file; others have properties the host cannot
read or write reliably. ``KnownSettings`` bundles both lists with the
sections used to seed a brand-new settings file.

Tables are built once and never mutated, so a single instance can be
shared freely between threads.
"""

from __future__ import annotations

import dataclasses
import pathlib
import types
from collections.abc import Iterable, Mapping

from rebracer.sections import SectionKey

# Subcategories that must never be loaded from shared data. Matched
# case-insensitively against the subcategory alone.
BLOCKED_SUBCATEGORIES = (
    # AutoSaveFile can point the IDE at a settings file on a hostile share
    "Import and Export Settings",
    "ImportAndExportSettings",
    # ProjectTemplatesLocation can serve pre-infected project templates
    "ProjectsAndSolution",
    # HomePage allows advertising; ViewSourceExternalProgram allows RCE
    "WebBrowser",
    # StartPageRSSUrl allows advertising and is machine-wide anyway
    "Startup",
)

SKIP_PROPERTIES: dict[SectionKey, tuple[str, ...]] = {
    # Reading throws DISP_E_EXCEPTION
    SectionKey("TextEditor", "C/C++ Specific"): ("IntellisenseOptions",),
    # Writing throws DISP_E_MEMBERNOTFOUND
    SectionKey("TextEditor", "JavaScript Specific"): ("ImplicitReferences",),
    # Misspelled in some host builds; skipped to avoid spurious warnings
    SectionKey("TextEditor", "CSharp-Specific"): ("NewLineQueryExpression_EachClause",),
}

# Order here is the order sections appear in a new settings file.
# HTML Specific and HTMLX Specific are left out: too slow and unreliable.
DEFAULT_CATEGORIES = (
    SectionKey("Environment", "TaskList"),
    SectionKey("TextEditor", "CSharp-Specific"),
    SectionKey("TextEditor", "JavaScript Specific"),
    SectionKey("TextEditor", "C/C++ Specific"),
    SectionKey("TextEditor", "TypeScript Specific"),
    SectionKey("TextEditor", "XAML Specific"),
)


def _upper_char(c: str) -> str:
    upper = c.upper()
    # Keep characters whose upper case expands, e.g. "ß" -> "SS".
    return upper if len(upper) == 1 else c


def _fold(name: str) -> str:
    return "".join(_upper_char(c) for c in name)


@dataclasses.dataclass(frozen=True, eq=False)
class KnownSettings:
    """Immutable policy tables plus the lookups over them.

    Instances compare and hash by identity.
    """

    blocked_subcategories: frozenset[str]
    skip_properties: Mapping[SectionKey, frozenset[str]]
    default_categories: tuple[SectionKey, ...]

    @classmethod
    def build(
        cls,
        blocked: Iterable[str] = BLOCKED_SUBCATEGORIES,
        skip: Mapping[SectionKey, Iterable[str]] = SKIP_PROPERTIES,
        defaults: Iterable[SectionKey] = DEFAULT_CATEGORIES,
    ) -> KnownSettings:
        """Freeze plain collections into a ``KnownSettings``."""
        return cls(
            blocked_subcategories=frozenset(_fold(name) for name in blocked),
            skip_properties=types.MappingProxyType(
                {section: frozenset(names) for section, names in skip.items()}
            ),
            default_categories=tuple(defaults),
        )

    def is_allowed(self, section: SectionKey) -> bool:
        """Return False if *section* could let shared data do harm."""
        return _fold(section.subcategory) not in self.blocked_subcategories

    def should_skip(self, section: SectionKey, property_name: str) -> bool:
        """Return True if *property_name* cannot be persisted reliably."""
        names = self.skip_properties.get(section)
        if names is None:
            return False
        return property_name in names

    def with_blocked(self, names: Iterable[str]) -> KnownSettings:
        """Return a copy that also blocks *names*."""
        extra = frozenset(_fold(name) for name in names)
        return dataclasses.replace(
            self, blocked_subcategories=self.blocked_subcategories | extra
        )


DEFAULT_POLICY = KnownSettings.build()


def is_allowed(section: SectionKey) -> bool:
    return DEFAULT_POLICY.is_allowed(section)


def should_skip(section: SectionKey, property_name: str) -> bool:
    return DEFAULT_POLICY.should_skip(section, property_name)


def default_categories() -> tuple[SectionKey, ...]:
    return DEFAULT_POLICY.default_categories


def load_policy(root: pathlib.Path | None = None) -> KnownSettings:
    """Return the built-in policy extended by the ``policy`` config section.

    Raises ``ValueError`` if ``policy.extra_blocked`` has the wrong shape.
    """
    import rebracer.config
    import rebracer.policy.config

    cfg = rebracer.config.load("policy", root)
    extra = rebracer.policy.config.split_names(cfg.extra_blocked)
    if not extra:
        return DEFAULT_POLICY
    return DEFAULT_POLICY.with_blocked(extra)
