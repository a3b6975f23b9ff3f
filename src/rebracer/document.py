"""Apply a settings policy to a whole settings document.

Parsing and writing live here so that ``rebracer.sections`` and
``rebracer.policy`` stay free of I/O.
"""

from __future__ import annotations

import dataclasses
import logging
import pathlib
import xml.etree.ElementTree as ET

import rebracer.policy.known
import rebracer.sections

logger = logging.getLogger("rebracer.document")

PROPERTY_TAG = "PropertyValue"
ROOT_TAG = "UserSettings"


@dataclasses.dataclass
class SectionReport:
    """What a caller should do with one section of a document."""

    section: rebracer.sections.SectionKey
    allowed: bool
    properties: list[str] = dataclasses.field(default_factory=list)
    skipped: list[str] = dataclasses.field(default_factory=list)


def parse_settings(path: pathlib.Path) -> ET.ElementTree:
    """Parse a settings file; XML syntax errors become MalformedDocumentError."""
    try:
        return ET.parse(path)
    except ET.ParseError as exc:
        raise rebracer.sections.MalformedDocumentError(
            f"{path}: not a well-formed settings file ({exc})"
        ) from exc


def filter_sections(
    root: ET.Element | ET.ElementTree,
    policy: rebracer.policy.known.KnownSettings = rebracer.policy.known.DEFAULT_POLICY,
) -> list[SectionReport]:
    """Classify every section of *root* and its properties against *policy*.

    Blocked sections are reported without properties. Property elements
    that have no ``name`` attribute are ignored.
    """
    reports: list[SectionReport] = []
    for section, element in rebracer.sections.iter_sections(root):
        if not policy.is_allowed(section):
            logger.debug("Blocked section %s", section)
            reports.append(SectionReport(section=section, allowed=False))
            continue

        report = SectionReport(section=section, allowed=True)
        for prop in element.iterfind(PROPERTY_TAG):
            name = prop.get("name")
            if name is None:
                continue
            if policy.should_skip(section, name):
                logger.debug("Skipping %s in %s", name, section)
                report.skipped.append(name)
            else:
                report.properties.append(name)
        reports.append(report)
    return reports


def new_document(
    policy: rebracer.policy.known.KnownSettings = rebracer.policy.known.DEFAULT_POLICY,
) -> ET.ElementTree:
    """Build an empty settings document seeded with the default sections.

    Categories appear in the order they are first used by the defaults.
    """
    root = ET.Element(ROOT_TAG)
    container = ET.SubElement(root, rebracer.sections.CONTAINER_TAG)
    categories: dict[str, ET.Element] = {}
    for section in policy.default_categories:
        category = categories.get(section.category)
        if category is None:
            category = ET.SubElement(
                container, rebracer.sections.CATEGORY_TAG, name=section.category
            )
            categories[section.category] = category
        ET.SubElement(
            category, rebracer.sections.SUBCATEGORY_TAG, name=section.subcategory
        )
    return ET.ElementTree(root)


def write_document(tree: ET.ElementTree, path: pathlib.Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    ET.indent(tree)
    tree.write(path, encoding="utf-8", xml_declaration=True)
    logger.info("Wrote settings document to %s", path)
