#!/usr/bin/env python3
"""
Cluster Networking Installer Pre-flight

Determines what kind of Kubernetes cluster the installer is talking to,
derives safe defaults for cluster-specific parameters and rejects invalid
configuration before anything is applied to the cluster.

Features:
- Auto-detection of the cluster flavor (kind, minikube, EKS, GKE, AKS, ...)
- Flavor-specific validation checks, individually skippable
- Datapath mode and kube-proxy-replacement defaults per flavor
- Cluster name and encryption mode validation
- YAML values files, with CLI flags taking precedence
"""

import argparse
import json
import logging
import sys
import time
from typing import Optional

from installer import K8sInstaller, K8sUninstaller, build_parameters, load_values_file
from installer.checks import default_registry
from lib import (
    FlavorDetector,
    InstallerError,
    KubeClient,
    OperationCancelledError,
    OperationContext,
    __version__,
    __version_date__,
    format_duration,
    setup_logging,
)
from lib.constants import (
    DEFAULT_OPERATION_TIMEOUT,
    DEFAULT_REQUEST_TIMEOUT,
    EXIT_FAILURE,
    EXIT_INTERRUPT,
    EXIT_SUCCESS,
)
from lib.validation import InputValidator, ValidationError


def parse_args(argv: Optional[list] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Cluster networking installer pre-flight",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Detect the cluster flavor and validate the install configuration
  %(prog)s --context kind-dev

  # Skip a flavor-specific check
  %(prog)s --context minikube --disable-check=minimum-version

  # AKS clusters need the resource group for the datapath lookup
  %(prog)s --context prod-aks --azure-resource-group prod-rg

  # Flavor detection only, as done before uninstalling
  %(prog)s --context kind-dev --uninstall
        """,
    )

    parser.add_argument("--context", help="Kubernetes context (defaults to the current context)")
    parser.add_argument(
        "--uninstall",
        action="store_true",
        help="Only auto-detect the cluster flavor, as done before uninstalling",
    )

    install_group = parser.add_argument_group("Install Options")
    install_group.add_argument(
        "--disable-check",
        action="append",
        default=None,
        metavar="NAME",
        help=(
            "Disable a validation check by name (repeatable). Known checks: "
            + ", ".join(default_registry().check_names())
        ),
    )
    install_group.add_argument("--datapath-mode", help="Datapath mode (auto-detected when unset)")
    install_group.add_argument(
        "--kube-proxy-replacement",
        help="kube-proxy replacement setting (auto-detected for some flavors when unset)",
    )
    install_group.add_argument("--cluster-name", help="Name of the cluster (auto-detected when unset)")
    install_group.add_argument(
        "--encryption",
        help="Encryption mode: disabled, ipsec or wireguard (default: disabled)",
    )
    install_group.add_argument("--ipam", help="DEPRECATED: IPAM mode, kept for backwards compatibility")
    install_group.add_argument("--version", help="Chart version to install")
    install_group.add_argument("--values", help="YAML file with install parameters (flags take precedence)")

    azure_group = parser.add_argument_group("Azure Options")
    azure_group.add_argument("--azure-resource-group", help="Resource group of the AKS cluster")
    azure_group.add_argument("--azure-subscription-id", help="Subscription of the AKS cluster")

    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_OPERATION_TIMEOUT,
        help=f"Overall pre-flight timeout in seconds (default: {DEFAULT_OPERATION_TIMEOUT})",
    )
    parser.add_argument(
        "--request-timeout",
        type=int,
        default=DEFAULT_REQUEST_TIMEOUT,
        help=f"Kubernetes API request timeout in seconds (default: {DEFAULT_REQUEST_TIMEOUT})",
    )

    # Logging
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    parser.add_argument(
        "--log-format",
        choices=["text", "json"],
        default="text",
        help="Log output format (text or json)",
    )

    return parser.parse_args(argv)


def validate_args(args: argparse.Namespace, logger: logging.Logger) -> None:
    """Validate input values that can be checked without a cluster."""
    try:
        InputValidator.validate_all_cli_args(args)
    except ValidationError as e:
        logger.error("Validation error: %s", str(e))
        sys.exit(EXIT_FAILURE)


def run_uninstall_autodetect(
    detector: FlavorDetector,
    ctx: OperationContext,
    logger: logging.Logger,
) -> bool:
    """Detect the flavor ahead of an uninstall."""
    uninstaller = K8sUninstaller(detector, logger=logger)
    flavor = uninstaller.autodetect(ctx)
    logger.info("Cluster kind: %s", flavor.kind)
    return True


def run_install_preflight(
    args: argparse.Namespace,
    detector: FlavorDetector,
    ctx: OperationContext,
    logger: logging.Logger,
) -> bool:
    """Run the install pre-flight chain and report the resolved parameters."""
    values = load_values_file(args.values) if args.values else None
    params = build_parameters(args, values)

    installer = K8sInstaller(detector, params, logger=logger)
    resolved = installer.autodetect_and_validate(ctx)

    logger.info("\n" + "=" * 60)
    logger.info("PRE-FLIGHT PASSED")
    logger.info("=" * 60)
    logger.info("Resolved parameters: %s", json.dumps(resolved.to_dict(), sort_keys=True))
    return True


def main(argv: Optional[list] = None) -> None:
    """Main entry point."""
    args = parse_args(argv)

    # Set up logging early so validate_args can use logger
    logger = setup_logging(args.verbose, args.log_format)

    validate_args(args, logger)

    logger.info("Cluster networking installer pre-flight v%s (%s)", __version__, __version_date__)
    started = time.monotonic()
    ctx = OperationContext(timeout=args.timeout)

    try:
        client = KubeClient(args.context, request_timeout=args.request_timeout)
    except Exception as exc:  # pragma: no cover - fatal init error
        logger.error("Failed to initialize Kubernetes client: %s", exc)
        sys.exit(EXIT_FAILURE)

    detector = FlavorDetector(client, logger=logger)

    try:
        if args.uninstall:
            success = run_uninstall_autodetect(detector, ctx, logger)
        else:
            success = run_install_preflight(args, detector, ctx, logger)
    except KeyboardInterrupt:
        ctx.cancel()
        logger.warning("\n\nOperation interrupted by user")
        sys.exit(EXIT_INTERRUPT)
    except OperationCancelledError as exc:
        logger.error("\n✗ Pre-flight aborted: %s", exc)
        sys.exit(EXIT_FAILURE)
    except InstallerError as exc:
        logger.error("\n✗ Pre-flight failed: %s", exc)
        sys.exit(EXIT_FAILURE)

    logger.info("Finished in %s", format_duration(time.monotonic() - started))
    sys.exit(EXIT_SUCCESS if success else EXIT_FAILURE)


if __name__ == "__main__":
    main()
