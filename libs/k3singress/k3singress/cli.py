"""
CLI for k3singress - add/remove Kubernetes ingress rules from the command line.

Commands:
    set       Add a backend rule, creating the ingress if needed
    delete    Remove backend rules by service (and port)
"""

import argparse
import logging
import sys
from typing import List, Optional

import yaml

from . import __version__
from .config import K3sIngressConfig, load_config
from .errors import IngressRuleError
from .options import COMMAND_DELETE, COMMAND_SET, create_options
from .runner import run


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="k3singress",
        description="Add/remove Kubernetes ingress rules via command line",
        epilog=(
            "examples:\n"
            "  k3singress set my-ingress --service foo --port 80 --host '*.foo.com'\n"
            "  k3singress set my-ingress --service foo --port 80 --host example.com --path /foo\n"
            "  k3singress delete my-ingress --service foo\n"
            "  k3singress delete my-ingress --service foo --port 80"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-f", "--config",
        default=None,
        help="Path to config file (default: .k3singress.yaml, searched up from cwd)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output",
    )

    # Flags shared by every command
    target = argparse.ArgumentParser(add_help=False)
    target.add_argument(
        "ingress",
        help="Name of the ingress",
    )
    target.add_argument(
        "-n", "--namespace",
        default=None,
        help="Namespace of the ingress (default: default)",
    )
    target.add_argument(
        "--context",
        default=None,
        help="Kubeconfig context to use",
    )
    target.add_argument(
        "--kubeconfig",
        default=None,
        help="Path to kubeconfig file",
    )
    target.add_argument(
        "--manifest-dir",
        default=None,
        help="Edit YAML manifests in <dir>/<namespace>/<ingress>.yaml instead of a cluster",
    )
    target.add_argument(
        "--service",
        required=True,
        help="Name of backend service (must be in the same namespace as the ingress)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # set command
    set_parser = subparsers.add_parser(
        COMMAND_SET,
        parents=[target],
        help="Add a backend rule. If the ingress does not exist it will be created",
    )
    set_parser.add_argument(
        "--port",
        type=int,
        required=True,
        help="Port number of backend service",
    )
    set_parser.add_argument(
        "--host",
        default="",
        help="Host e.g. foo.example.com, *.example.com, example.com (default: any host)",
    )
    set_parser.add_argument(
        "--path",
        default="/",
        help="Matching path (default: /)",
    )
    set_parser.add_argument(
        "--path-type",
        default="prefix",
        help="Matching type for path: prefix, exact, implementationspecific (default: prefix)",
    )
    set_parser.add_argument(
        "--tls-secret",
        default=None,
        help="TLS secret for the host (requires --host)",
    )
    set_parser.add_argument(
        "--ingress-class",
        default=None,
        help="Ingress class name used when the ingress is created",
    )

    # delete command
    delete_parser = subparsers.add_parser(
        COMMAND_DELETE,
        parents=[target],
        help="Remove backend rules. Deletes the ingress when no rules are left",
    )
    delete_parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port number of backend service (default: all ports)",
    )

    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def cmd_set(args: argparse.Namespace, cfg: K3sIngressConfig) -> int:
    """Handle set command."""
    try:
        options = create_options(
            COMMAND_SET,
            args.ingress,
            service=args.service,
            port=args.port,
            host=args.host,
            path=args.path,
            path_type=args.path_type,
            tls_secret=args.tls_secret,
            ingress_class=args.ingress_class,
        )
        run(options, cfg)
    except IngressRuleError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


def cmd_delete(args: argparse.Namespace, cfg: K3sIngressConfig) -> int:
    """Handle delete command."""
    try:
        options = create_options(
            COMMAND_DELETE,
            args.ingress,
            service=args.service,
            port=args.port,
        )
        run(options, cfg)
    except IngressRuleError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    configure_logging(args.verbose)

    try:
        cfg = load_config(args.config)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (ValueError, yaml.YAMLError) as e:
        print(f"Error: invalid config file: {e}", file=sys.stderr)
        return 1

    cfg = cfg.merge(
        namespace=args.namespace,
        context=args.context,
        kubeconfig=args.kubeconfig,
        manifest_dir=args.manifest_dir,
    )

    commands = {
        COMMAND_SET: cmd_set,
        COMMAND_DELETE: cmd_delete,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args, cfg)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
