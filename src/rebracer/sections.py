"""Section keys for Visual Studio style settings documents.

A settings document groups properties two levels deep::

    <ToolsOptions>
      <ToolsOptionsCategory name="TextEditor">
        <ToolsOptionsSubCategory name="CSharp-Specific">
          <PropertyValue name="TabSize">4</PropertyValue>
        </ToolsOptionsSubCategory>
      </ToolsOptionsCategory>
    </ToolsOptions>

A ``SectionKey`` names one subcategory by its (category, subcategory) pair.
Nothing here performs I/O; callers hand in an already parsed tree.
"""

from __future__ import annotations

import dataclasses
import xml.etree.ElementTree as ET
from collections.abc import Iterator

CONTAINER_TAG = "ToolsOptions"
CATEGORY_TAG = "ToolsOptionsCategory"
SUBCATEGORY_TAG = "ToolsOptionsSubCategory"


class MalformedDocumentError(ValueError):
    """A settings document does not have the expected section structure."""


@dataclasses.dataclass(frozen=True)
class SectionKey:
    """One options page, identified by category and subcategory name.

    Comparison and hashing are exact: ``SectionKey("a", "B")`` and
    ``SectionKey("a", "b")`` are different sections.
    """

    category: str
    subcategory: str

    def __str__(self) -> str:
        # Ambiguous when a name contains "/"; only for display.
        return f"{self.category}/{self.subcategory}"

    @classmethod
    def from_element(
        cls, element: ET.Element, parent: ET.Element | None
    ) -> SectionKey:
        """Build a key from a subcategory element and its category parent.

        Raises ``MalformedDocumentError`` if *parent* is missing or either
        element has no ``name`` attribute. Empty names are accepted.
        """
        if parent is None:
            raise MalformedDocumentError(
                f"<{element.tag}> has no parent category element"
            )
        subcategory = element.get("name")
        if subcategory is None:
            raise MalformedDocumentError(
                f"<{element.tag}> is missing its name attribute"
            )
        category = parent.get("name")
        if category is None:
            raise MalformedDocumentError(
                f"<{parent.tag}> containing {subcategory!r} is missing its name attribute"
            )
        return cls(category, subcategory)


def iter_sections(
    root: ET.Element | ET.ElementTree,
) -> Iterator[tuple[SectionKey, ET.Element]]:
    """Yield ``(key, subcategory_element)`` for every section under *root*.

    Walks ``ToolsOptions`` → ``ToolsOptionsCategory`` →
    ``ToolsOptionsSubCategory`` in document order. Each call starts a fresh
    walk, so the same tree can be iterated any number of times.
    """
    if isinstance(root, ET.ElementTree):
        root = root.getroot()
    for container in root.iterfind(CONTAINER_TAG):
        for category in container.iterfind(CATEGORY_TAG):
            for subcategory in category.iterfind(SUBCATEGORY_TAG):
                yield SectionKey.from_element(subcategory, category), subcategory
