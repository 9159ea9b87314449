from __future__ import annotations

import argparse
import logging
import sys
from typing import Any, Dict, Optional

from . import __version__
from .config import AUDIT_LEVELS, DEFAULT_AUDIT_LEVEL, PackagingRequest, build_request
from .errors import PackagerError
from .lib.npm import DEFAULT_REGISTRY
from .logging_utils import configure_logging
from .packager import NodePackager

logger = logging.getLogger(__name__)

NAME = "Node-RED Node Packager"
DESCRIPTION = "Packs a Node-RED library to a tarball (*.tgz) for Node-RED palette import."
BANNER = f"""\
{NAME} {__version__}
{DESCRIPTION}

Examples:
   node-packager node-red-contrib-ctrlx-automation
   node-packager --verbose node-red-contrib-ctrlx-automation
   node-packager --no-audit node-red-contrib-ctrlx-automation
   node-packager --audit-fix node-red-contrib-ctrlx-automation

Prerequisites:
 - Ensure Node.js to be installed on your system.

Import:
 - Navigate to the login page and open the Node-RED Editor.
 - Click on 'Manage palette' in the left Node-RED menu.
 - Click on tab 'Installation'.
 - Click the 'Upload Button' and choose your packed library for upload.
 - In some cases you have to restart the Node-RED App to apply the changes.

IMPORTANT:
 - Imported libraries override libraries, shipped with the Node-RED App.
 - This libraries won't be updated on future App updates.
 - To enable the library update, navigate to '{{USERDIR}}/node_modules/{{INSTALLED_LIBRARY}}'
   and remove the installed library, before you run the update.
"""


def run(request: PackagingRequest, *, packager: Optional[NodePackager] = None) -> str:
    """Pack one library; returns the tarball path."""
    return (packager or NodePackager()).pack(request)


def build_parser() -> argparse.ArgumentParser:
    # Help is handled in main() so the banner is printed before the usage.
    p = argparse.ArgumentParser(prog="node-packager", description=DESCRIPTION, add_help=False)
    p.add_argument("library", nargs="?", default="", help="Library to pack, e.g. name, name@1.2.3 or @scope/name")
    p.add_argument(
        "--src",
        default=None,
        help="Packs an already installed library directory, instead of fetching it from the npm registry.",
    )
    p.add_argument("--registry", default=None, help=f"The npm registry (default: {DEFAULT_REGISTRY}).")
    p.add_argument("--proxy", default=None, help="Sets the proxy (e.g. if behind a corporate proxy).")
    p.add_argument(
        "--audit-level",
        default=None,
        choices=AUDIT_LEVELS,
        help=f"The audit level used for security auditing and fixing (default: {DEFAULT_AUDIT_LEVEL}).",
    )
    p.add_argument("--audit-retries", type=int, default=None, help="Re-run a failed audit this many times (default: 0).")
    p.add_argument("--config", default=None, help="YAML file with default option values.")
    p.add_argument("--log", default=None, help="Also write a debug log to this file.")
    p.add_argument("--verbose", action="store_true", default=None, help="Enables verbosity.")
    p.add_argument("--no-audit", action="store_true", default=None, help="Disables vulnerability audit.")
    p.add_argument("--audit-fix", action="store_true", default=None, help="Enables vulnerability fix.")
    p.add_argument(
        "--keep-tmp",
        action="store_true",
        default=None,
        help="Prevents the used temporary directory from being removed after packing.",
    )
    p.add_argument("--version", action="store_true", help="Prints the version.")
    p.add_argument("-h", "--help", action="store_true", help="Prints the help.")
    return p


def _overrides(args: argparse.Namespace) -> Dict[str, Any]:
    return {
        "src_dir": args.src,
        "registry": args.registry,
        "proxy": args.proxy,
        "audit_level": args.audit_level,
        "audit_retries": args.audit_retries,
        "verbose": args.verbose,
        "no_audit": args.no_audit,
        "audit_fix": args.audit_fix,
        "keep_tmp": args.keep_tmp,
    }


def main(argv: Optional[list[str]] = None) -> int:
    p = build_parser()
    args = p.parse_args(argv)

    if args.version:
        print(__version__)
        return 0

    print(BANNER)

    if args.help:
        p.print_help()
        return 0

    try:
        request = build_request(args.library, overrides=_overrides(args), config_path=args.config)
        configure_logging(log_path=args.log, level=logging.DEBUG if request.verbose else logging.INFO)
        run(request)
        return 0
    except KeyboardInterrupt:
        return 130
    except (PackagerError, OSError, ValueError, RuntimeError) as e:
        print()
        p.print_help()
        print()
        print(f"ERROR: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
