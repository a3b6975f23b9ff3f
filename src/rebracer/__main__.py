"""rebracer CLI — check and seed shared settings files.

Usage:
    rebracer check <file>   Report which sections and properties would load
    rebracer defaults       List the sections a new settings file starts with
    rebracer init <file>    Write a new settings file with the default sections
    rebracer config <cmd>   Configuration (get/set/list/show)
"""

from __future__ import annotations

import argparse
import logging
import pathlib
import sys

import rebracer.config
import rebracer.document
import rebracer.policy.config
import rebracer.policy.known


def _setup_logging(root: pathlib.Path, *, verbose: bool) -> None:
    if verbose:
        level = logging.DEBUG
    else:
        cfg = rebracer.config.load("policy", root)
        try:
            level = rebracer.policy.config.log_level(cfg.log_level)
        except ValueError:
            level = logging.WARNING
    logging.basicConfig(
        level=level, format="%(levelname)s %(name)s: %(message)s"
    )


def _cmd_check(args: list[str]) -> int:
    """Report the policy decision for every section of a settings file."""
    parser = argparse.ArgumentParser(prog="rebracer check")
    parser.add_argument("file", type=pathlib.Path)
    parser.add_argument("--path", type=pathlib.Path, default=pathlib.Path.cwd())
    parser.add_argument("--verbose", "-v", action="store_true")
    ns = parser.parse_args(args)

    _setup_logging(ns.path, verbose=ns.verbose)
    try:
        policy = rebracer.policy.known.load_policy(ns.path)
        tree = rebracer.document.parse_settings(ns.file)
        reports = rebracer.document.filter_sections(tree, policy)
    except (OSError, ValueError) as exc:
        # ValueError covers MalformedDocumentError and bad policy config
        print(f"error: {exc}", file=sys.stderr)
        return 1

    for report in reports:
        verdict = "allow" if report.allowed else "block"
        print(f"{verdict:<6s}{report.section}")
        for name in report.skipped:
            print(f"  skip  {name}")

    blocked = sum(1 for r in reports if not r.allowed)
    print(f"{len(reports)} sections, {blocked} blocked")
    return 0


def _cmd_defaults(args: list[str]) -> int:
    """Print the default sections in order."""
    parser = argparse.ArgumentParser(prog="rebracer defaults")
    parser.parse_args(args)
    for section in rebracer.policy.known.default_categories():
        print(section)
    return 0


def _cmd_init(args: list[str]) -> int:
    """Write a new settings file seeded with the default sections."""
    parser = argparse.ArgumentParser(prog="rebracer init")
    parser.add_argument("file", type=pathlib.Path)
    parser.add_argument("--force", action="store_true", help="Overwrite an existing file")
    ns = parser.parse_args(args)

    if ns.file.exists() and not ns.force:
        # Existing files keep whatever sections they already have.
        print(f"{ns.file} already exists (use --force to overwrite)", file=sys.stderr)
        return 1

    tree = rebracer.document.new_document()
    try:
        rebracer.document.write_document(tree, ns.file)
    except OSError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    print(f"Created {ns.file}")
    return 0


def _cmd_config(args: list[str]) -> int:
    """Configuration."""
    import rebracer.config_cli

    return rebracer.config_cli.main(args)


def main() -> None:
    args = sys.argv[1:]
    if not args:
        print(__doc__)
        sys.exit(1)

    cmd = args[0]
    rest = args[1:]

    if cmd == "check":
        sys.exit(_cmd_check(rest))
    elif cmd == "defaults":
        sys.exit(_cmd_defaults(rest))
    elif cmd == "init":
        sys.exit(_cmd_init(rest))
    elif cmd == "config":
        sys.exit(_cmd_config(rest))
    else:
        print(__doc__)
        sys.exit(1)


if __name__ == "__main__":
    main()
