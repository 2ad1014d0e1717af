"""
Main CLI module with argument parsing and command execution.

This module provides the main CLI interface including:
- Command line argument parsing
- Command routing and execution
- Mapping of resolution and configuration errors to exit codes
"""
import argparse
import os
import sys
from typing import Any, Dict, List, Optional, Sequence, Tuple

from bindery._version import __version__
from bindery.bootstrap import Application
from bindery.cli.formatters import format_output
from bindery.demo import DEMO_TYPES, register_demo_services
from bindery.domain.base.di_contracts import describe_key
from bindery.infrastructure.di.container import DIContainer
from bindery.infrastructure.di.exceptions import DependencyRegistrationError, DependencyResolutionError
from bindery.infrastructure.exceptions import ConfigurationError
from bindery.infrastructure.logging.logger import get_logger

EXIT_OK = 0
EXIT_RESOLUTION_ERROR = 1
EXIT_USAGE_ERROR = 2


def _binding_pair(value: str) -> Tuple[str, str]:
    """argparse type for ABSTRACT=CONCRETE."""
    key, separator, target = value.partition("=")
    if not separator or not key.strip() or not target.strip():
        raise argparse.ArgumentTypeError(f"expected ABSTRACT=CONCRETE, got {value!r}")
    return key.strip(), target.strip()


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""

    parser = argparse.ArgumentParser(
        prog=os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "bindery",
        description="bindery - bind abstract keys to concrete types and resolve them",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s resolve CheckoutController --bind PaymentInterface=NagadPayment
  %(prog)s explain OrderService --format table
  %(prog)s --config bindery.yml bindings
  %(prog)s demo --payment BkashPayment --amount 120
        """,
    )

    # Global options
    parser.add_argument("--config", help="Configuration file path (JSON or YAML)")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override the configured logging level",
    )
    parser.add_argument(
        "--format", choices=["json", "yaml", "table"], default="json", help="Output format"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    binding_options = argparse.ArgumentParser(add_help=False)
    binding_options.add_argument(
        "--bind",
        action="append",
        default=[],
        type=_binding_pair,
        metavar="ABSTRACT=CONCRETE",
        help="Bind a key to a target (repeatable; later bindings win)",
    )
    binding_options.add_argument(
        "--singleton",
        action="append",
        default=[],
        metavar="KEY",
        help="Resolve KEY once and reuse it (repeatable)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    resolve_parser = subparsers.add_parser(
        "resolve", parents=[binding_options], help="Resolve a key and describe the instance"
    )
    resolve_parser.add_argument("key", help="Key to resolve: a catalogued name or dotted path")

    explain_parser = subparsers.add_parser(
        "explain", parents=[binding_options], help="Show how a key would be resolved"
    )
    explain_parser.add_argument("key", help="Key to explain: a catalogued name or dotted path")

    subparsers.add_parser("bindings", parents=[binding_options], help="List registered bindings")

    demo_parser = subparsers.add_parser("demo", help="Place a demo order through the container")
    demo_parser.add_argument("--payment", default="CreditCardPayment", help="PaymentInterface implementation")
    demo_parser.add_argument("--shipping", default="StandardShipping", help="ShippingCalculator implementation")
    demo_parser.add_argument("--amount", type=float, default=100.0, help="Order subtotal")
    demo_parser.add_argument("--weight", type=float, default=1.0, help="Parcel weight in kg")

    return parser.parse_args(argv)


def describe_instance(key: str, instance: Any) -> Dict[str, Any]:
    """Summarise a resolved instance and its injected collaborators."""
    attributes = {}
    for name, value in sorted(vars(instance).items() if hasattr(instance, "__dict__") else []):
        if name.startswith("_"):
            continue
        attributes[name] = describe_key(type(value))
    return {"key": key, "type": describe_key(type(instance)), "attributes": attributes}


def execute_command(args: argparse.Namespace, container: DIContainer) -> Dict[str, Any]:
    """Run a parsed command against a bootstrapped container."""
    if args.command == "resolve":
        return {"resolved": describe_instance(args.key, container.resolve(args.key))}

    if args.command == "explain":
        return {"plan": container.explain(args.key)}

    if args.command == "bindings":
        registrations = container.get_registrations().values()
        return {"bindings": [registration.to_dict() for registration in registrations]}

    if args.command == "demo":
        register_demo_services(container, payment=args.payment, shipping=args.shipping)
        order_service = container.resolve("OrderService")
        return {"receipt": order_service.place_order(args.amount, args.weight)}

    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = parse_args(argv)
    if not args.command:
        print("Error: No command specified. Use --help for usage information.", file=sys.stderr)
        return EXIT_USAGE_ERROR

    logger = get_logger(__name__)

    try:
        app = Application(args.config)
        container = app.initialize(
            catalog=DEMO_TYPES,
            extra_bindings=getattr(args, "bind", []),
            extra_singletons=getattr(args, "singleton", []),
            log_level=args.log_level,
        )
        result = execute_command(args, container)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE_ERROR
    except DependencyRegistrationError as e:
        logger.error(f"Registration error: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE_ERROR
    except (DependencyResolutionError, RecursionError) as e:
        logger.error(f"Resolution error: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RESOLUTION_ERROR

    print(format_output(result, args.format))
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
