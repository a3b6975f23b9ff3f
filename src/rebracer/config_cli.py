"""CLI for the ``policy`` config section.

Usage:
    rebracer config show                          Effective settings and block list
    rebracer config get <key>                     Print one effective value
    rebracer config set [--global] <key> <value>  Validate and store a value
    rebracer config reset [--global] <key>        Remove an override

Keys are ``extra_blocked`` and ``log_level`` (a ``policy.`` prefix is
accepted). ``extra_blocked`` takes a comma-separated list of subcategories.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

import rebracer.config
import rebracer.policy.config
import rebracer.policy.known
import rebracer.sections


def _key(raw: str) -> str:
    return raw[len("policy."):] if raw.startswith("policy.") else raw


def _extra_blocked(root: Path) -> list[str]:
    cfg = rebracer.config.load("policy", root)
    return rebracer.policy.config.split_names(cfg.extra_blocked)


def cmd_show(root: Path) -> int:
    """Print the effective policy settings and every blocked subcategory."""
    cfg = rebracer.config.load("policy", root)
    try:
        extra = rebracer.policy.config.split_names(cfg.extra_blocked)
    except ValueError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    print("[policy]")
    print(f"  extra_blocked = {extra!r}")
    print(f"  log_level = {cfg.log_level!r}")
    print()
    print("Blocked subcategories:")
    builtin = rebracer.policy.known.BLOCKED_SUBCATEGORIES
    width = max(len(name) for name in (*builtin, *extra))
    for name in builtin:
        print(f"  {name:<{width}s}  built-in")
    for name in extra:
        print(f"  {name:<{width}s}  config")
    return 0


def cmd_get(key: str, root: Path) -> int:
    key = _key(key)
    try:
        if key == "extra_blocked":
            print(", ".join(_extra_blocked(root)))
        elif key == "log_level":
            print(rebracer.config.load("policy", root).log_level)
        else:
            raise KeyError(f"Unknown key: policy.{key}")
    except (KeyError, ValueError) as exc:
        print(exc.args[0], file=sys.stderr)
        return 1
    return 0


def cmd_set(key: str, value: str, *, global_flag: bool, root: Path) -> int:
    key = _key(key)
    scope = "global" if global_flag else "local"
    try:
        parsed = rebracer.policy.config.parse_value(key, value)
        rebracer.config.write_override("policy", key, parsed, scope=scope, root=root)
    except (KeyError, ValueError) as exc:
        print(exc.args[0], file=sys.stderr)
        return 1

    shown = ", ".join(parsed) if isinstance(parsed, list) else parsed
    print(f"Set policy.{key} = {shown} ({scope})")
    if key == "extra_blocked":
        policy = rebracer.policy.known.DEFAULT_POLICY
        for name in parsed:
            if not policy.is_allowed(rebracer.sections.SectionKey("", name)):
                print(f"  note: {name!r} is already blocked by default")
    return 0


def cmd_reset(key: str, *, global_flag: bool, root: Path) -> int:
    key = _key(key)
    scope = "global" if global_flag else "local"
    if rebracer.config.remove_override("policy", key, scope=scope, root=root):
        print(f"Reset policy.{key} ({scope})")
    else:
        print(f"policy.{key} has no {scope} override")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for ``rebracer config``."""
    parser = argparse.ArgumentParser(
        prog="rebracer config",
        description="Show and change the settings policy configuration.",
    )
    parser.add_argument("--path", type=Path, default=Path.cwd(), help="Project root")
    sub = parser.add_subparsers(dest="subcmd")

    sub.add_parser("show", help="Effective settings and block list")

    p_get = sub.add_parser("get", help="Print one effective value")
    p_get.add_argument("key")

    p_set = sub.add_parser("set", help="Validate and store a value")
    p_set.add_argument("key")
    p_set.add_argument("value")
    p_set.add_argument("--global", dest="global_flag", action="store_true")

    p_reset = sub.add_parser("reset", help="Remove an override")
    p_reset.add_argument("key")
    p_reset.add_argument("--global", dest="global_flag", action="store_true")

    args = parser.parse_args(argv)

    if args.subcmd == "show":
        return cmd_show(args.path)
    elif args.subcmd == "get":
        return cmd_get(args.key, args.path)
    elif args.subcmd == "set":
        return cmd_set(args.key, args.value, global_flag=args.global_flag, root=args.path)
    elif args.subcmd == "reset":
        return cmd_reset(args.key, global_flag=args.global_flag, root=args.path)

    parser.print_help()
    return 1
