"""
Extension Bootstrap - command line entry point.

Installs the configured PostgreSQL extensions into the template database and
every application database, defers restart-gated ones until the server has
been restarted with the updated shared_preload_libraries.

Typical container use:

    # docker-entrypoint-initdb.d/10-extensions.sh (first start, during initdb)
    python /opt/bootstrap/bootstrap_extensions.py

    # after the restart the entrypoint performs
    BOOTSTRAP_RESTART_READY=true python /opt/bootstrap/bootstrap_extensions.py

Exit status:
    0  every action APPLIED or DEFERRED
    1  at least one action FAILED
    2  configuration error (cycle, unknown extension, bad variable); nothing applied
"""

import argparse
import json
import sys
from typing import List, Optional

from pydantic import ValidationError as PydanticValidationError

from config import AppConfig, BootstrapConfig, debug_config, parse_name_list
from config.env_validation import validate_environment, log_validation_results
from core.errors import ErrorCode, create_error_response
from core.registry import ExtensionRegistry
from exceptions import ConfigurationError
from services.bootstrap_service import ExtensionBootstrapper
from util_logger import LoggerFactory, ComponentType, log_exceptions, set_log_level

EXIT_OK = 0
EXIT_ACTION_FAILED = 1
EXIT_CONFIG_ERROR = 2

logger = LoggerFactory.create_logger(ComponentType.TRIGGER, "bootstrap_extensions")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Install PostgreSQL extensions in dependency order, gated on server restart",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Registry defaults into template1 and $POSTGRES_DB
  python bootstrap_extensions.py

  # Selected extensions into two databases
  python bootstrap_extensions.py --extensions postgis_tiger_geocoder,pg_trgm --databases app,reporting

  # Second pass after the server restarted with pg_cron preloaded
  python bootstrap_extensions.py --restart-ready

Every option can also be set through the environment (BOOTSTRAP_*).
        """,
    )
    parser.add_argument(
        "--extensions", type=str, default=None,
        help="Comma-separated extensions to install (default: registry defaults)",
    )
    parser.add_argument(
        "--databases", type=str, default=None,
        help="Comma-separated application databases (default: $POSTGRES_DB)",
    )
    parser.add_argument(
        "--template-database", type=str, default=None,
        help="Template database for template-only extensions (default: template1)",
    )
    parser.add_argument(
        "--restart-ready", action="store_const", const=True, default=None,
        help="The server was restarted with the updated preload libraries",
    )
    parser.add_argument(
        "--server-config", type=str, default=None,
        help="Server configuration file (default: $PGDATA/postgresql.conf)",
    )
    parser.add_argument(
        "--registry", type=str, default=None,
        help="JSON registry file replacing the built-in extension list",
    )
    parser.add_argument(
        "--timeout", type=float, default=None,
        help="Per-extension timeout in seconds (default: 600)",
    )
    parser.add_argument(
        "--action-log", type=str, default=None,
        help="Append one JSON line per action to this file",
    )
    parser.add_argument(
        "--json", action="store_true",
        help="Print the report as JSON",
    )
    parser.add_argument(
        "--list-extensions", action="store_true",
        help="Print the registry and exit without connecting",
    )
    return parser


def apply_overrides(config: AppConfig, args: argparse.Namespace) -> AppConfig:
    """
    Layer command line options over the environment configuration.

    Raises:
        pydantic.ValidationError: An override is invalid
    """
    overrides = {}
    if args.extensions is not None:
        overrides["extensions"] = parse_name_list(args.extensions)
    if args.databases is not None:
        overrides["databases"] = parse_name_list(args.databases)
    if args.template_database is not None:
        overrides["template_database"] = args.template_database
    if args.restart_ready is not None:
        overrides["restart_ready"] = args.restart_ready
    if args.server_config is not None:
        overrides["server_config_file"] = args.server_config
    if args.registry is not None:
        overrides["registry_file"] = args.registry
    if args.timeout is not None:
        overrides["action_timeout_seconds"] = args.timeout
    if args.action_log is not None:
        overrides["action_log_file"] = args.action_log

    if not overrides:
        return config

    bootstrap = BootstrapConfig(**{**config.bootstrap.model_dump(), **overrides})
    return config.model_copy(update={"bootstrap": bootstrap})


def format_registry(registry: ExtensionRegistry) -> str:
    defaults = set(registry.default_requested())
    lines = []
    for name in registry.names():
        spec = registry[name]
        flags = []
        if name in defaults:
            flags.append("default")
        if spec.requires_restart:
            flags.append(f"restart: preload {spec.preload_library}")
        flags.append(spec.target_scope.value)
        deps = f" <- {', '.join(sorted(spec.depends_on))}" if spec.depends_on else ""
        lines.append(f"{name}{deps}  [{'; '.join(flags)}]")
    return "\n".join(lines)


def config_error(args: argparse.Namespace, error_code: ErrorCode, message: str, **kwargs) -> int:
    """Report a configuration error (as JSON with --json) and return exit status 2."""
    if args.json:
        print(json.dumps(create_error_response(error_code, message, **kwargs), indent=2))
    return EXIT_CONFIG_ERROR


@log_exceptions(logger=logger)
def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    # Validate before anything connects or writes
    env_results = validate_environment(include_warnings=False)
    if not log_validation_results(logger, env_results):
        invalid = [r for r in env_results if r.severity == "error"]
        return config_error(
            args,
            ErrorCode.CONFIG_ERROR,
            "; ".join(f"{r.var_name}: {r.message}" for r in invalid),
            variables=[r.to_dict() for r in invalid],
        )

    try:
        config = apply_overrides(AppConfig.from_environment(), args)
    except (PydanticValidationError, ValueError) as e:
        logger.error(f"❌ Invalid configuration: {e}")
        return config_error(args, ErrorCode.CONFIG_ERROR, f"Invalid configuration: {e}")

    set_log_level(config.effective_log_level)
    logger.debug("Effective configuration", extra={'custom_dimensions': debug_config(config)})
    bootstrap = config.bootstrap

    try:
        if args.list_extensions:
            registry = (
                ExtensionRegistry.from_file(bootstrap.registry_file)
                if bootstrap.registry_file else ExtensionRegistry.default()
            )
            registry.validate()
            print(format_registry(registry))
            return EXIT_OK

        bootstrapper = ExtensionBootstrapper.from_config(config)
        report = bootstrapper.run(
            requested=bootstrap.extensions,
            databases=bootstrap.databases,
            server_ready_for_restart_gated_extensions=bootstrap.restart_ready,
        )
    except ConfigurationError as e:
        logger.error(f"❌ Configuration error, nothing applied: {e}")
        return config_error(args, e.error_code, str(e))

    if args.json:
        print(json.dumps(report.to_dict(), indent=2, default=str))
    else:
        print(report.format_text())

    return EXIT_OK if report.exit_code == 0 else EXIT_ACTION_FAILED


if __name__ == "__main__":
    sys.exit(main())
