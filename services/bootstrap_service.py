# ============================================================================
# EXTENSION BOOTSTRAPPER
# ============================================================================
# STATUS: Services - Bootstrap orchestrator
# PURPOSE: Validate, resolve, write restart config, fan out, apply, report
# ============================================================================
"""
ExtensionBootstrapper - one bootstrap run, start to report.

Workflow:
    1. Validate the registry (unknown dependencies, cycles). Fatal: raises
       before any action is created or any file is written.
    2. Resolve the install order for the requested extensions.
    3. Build the database targets (template first).
    4. If restart-gated extensions are in the order, update the server
       configuration. A ConfigWriteError is recorded in the report and the
       run continues with everything that does not need a restart.
    5. Fan out, apply, build the report, append to the action log.

Usage:
    from services.bootstrap_service import ExtensionBootstrapper

    bootstrapper = ExtensionBootstrapper.from_config(get_config())
    report = bootstrapper.run(
        requested=None,                 # registry defaults
        databases=["app"],
        server_ready_for_restart_gated_extensions=False,
    )
    print(report.format_text())

Exports:
    ExtensionBootstrapper: Orchestrator
"""

import uuid
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Sequence

from config import AppConfig
from config.defaults import BootstrapDefaults
from core.logic import build_targets, expand_actions, resolve_install_order
from core.models import BootstrapReport
from core.registry import ExtensionRegistry
from exceptions import ConfigWriteError
from infrastructure import IActionLog, IExtensionCatalog, JSONLActionLog, NullActionLog
from util_logger import LoggerFactory, ComponentType, LogContext
from .extension_applier import RestartGatedApplier
from .restart_config_writer import RestartConfigWriter


class ExtensionBootstrapper:
    """
    Orchestrates one extension bootstrap run.

    Collaborators are injected so tests can run the whole sequence against
    an in-memory catalog and a temporary config file.
    """

    def __init__(
        self,
        registry: ExtensionRegistry,
        catalog: IExtensionCatalog,
        config_writer: Optional[RestartConfigWriter] = None,
        template_database: str = BootstrapDefaults.TEMPLATE_DATABASE,
        timeout_seconds: float = BootstrapDefaults.ACTION_TIMEOUT_SECONDS,
        action_log: Optional[IActionLog] = None
    ):
        self.registry = registry
        self.catalog = catalog
        self.config_writer = config_writer
        self.template_database = template_database
        self.timeout_seconds = timeout_seconds
        self.action_log = action_log or NullActionLog()
        self.logger = LoggerFactory.create_logger(ComponentType.SERVICE, "ExtensionBootstrapper")

    @classmethod
    def from_config(
        cls,
        config: AppConfig,
        catalog: Optional[IExtensionCatalog] = None,
        registry: Optional[ExtensionRegistry] = None
    ) -> "ExtensionBootstrapper":
        """
        Wire the production collaborators from configuration.

        Raises:
            RegistryError: The registry file is unreadable or invalid
        """
        bootstrap = config.bootstrap

        if registry is None:
            if bootstrap.registry_file:
                registry = ExtensionRegistry.from_file(bootstrap.registry_file)
            else:
                registry = ExtensionRegistry.default()

        if catalog is None:
            from infrastructure import PostgreSQLExtensionCatalog
            catalog = PostgreSQLExtensionCatalog(config.database)

        action_log = JSONLActionLog(bootstrap.action_log_file) if bootstrap.action_log_file else None

        return cls(
            registry=registry,
            catalog=catalog,
            config_writer=RestartConfigWriter(bootstrap.effective_server_config_file),
            template_database=bootstrap.template_database,
            timeout_seconds=bootstrap.action_timeout_seconds,
            action_log=action_log,
        )

    def run(
        self,
        requested: Optional[Iterable[str]] = None,
        databases: Sequence[str] = (),
        server_ready_for_restart_gated_extensions: bool = False
    ) -> BootstrapReport:
        """
        Execute one bootstrap run.

        Args:
            requested: Extension names; None means the registry's default set
            databases: Application databases (the template is always included)
            server_ready_for_restart_gated_extensions: True only after a restart
                with the updated configuration

        Returns:
            BootstrapReport with every action in a terminal state

        Raises:
            CyclicDependencyError: Dependency cycle, nothing applied
            UnknownExtensionError: Unknown name, nothing applied
        """
        requested_names: List[str] = (
            list(requested) if requested is not None else self.registry.default_requested()
        )
        run_id = str(uuid.uuid4())
        started_at = datetime.now(timezone.utc)

        self.logger.info("=" * 70)
        self.logger.info("🚀 EXTENSION BOOTSTRAP STARTED")
        self.logger.info(f"   Run: {run_id}")
        self.logger.info(f"   Requested: {', '.join(requested_names) or '(none)'}")
        self.logger.info(f"   Restart-gated extensions enabled: {server_ready_for_restart_gated_extensions}")
        self.logger.info("=" * 70)

        # Step 1-2: fatal checks, nothing applied on failure
        self.registry.validate()
        order = resolve_install_order(requested_names, self.registry)
        self.logger.info(f"   Install order: {[spec.name for spec in order]}")

        # Step 3: targets
        targets = build_targets(databases, self.template_database)

        report = BootstrapReport(
            run_id=run_id,
            started_at=started_at,
            requested=requested_names,
            databases=[t.name for t in targets],
            template_database=self.template_database,
            server_ready_for_restart_gated_extensions=server_ready_for_restart_gated_extensions,
            install_order=[spec.name for spec in order],
        )

        # Step 4: restart configuration
        if self.config_writer is not None and any(spec.requires_restart for spec in order):
            try:
                report.config_write = self.config_writer.write(order, template_database=self.template_database)
            except ConfigWriteError as e:
                report.config_write_error = str(e)
                report.config_write_path = e.path
                self.logger.error(
                    f"❌ Server configuration not updated, restart-gated extensions "
                    f"will stay deferred: {e}"
                )

        # Step 5: fan out and apply
        actions = expand_actions(order, targets)
        applier = RestartGatedApplier(
            self.catalog,
            server_ready_for_restart_gated_extensions=server_ready_for_restart_gated_extensions,
            timeout_seconds=self.timeout_seconds,
        )
        report.actions = applier.apply(actions)
        report.finished_at = datetime.now(timezone.utc)

        for action in report.actions:
            self.action_log.record(run_id, action)

        self._log_summary(report)
        return report

    def _log_summary(self, report: BootstrapReport) -> None:
        summary = report.summary
        self.logger.info("=" * 70)
        if report.success:
            self.logger.info("✅ EXTENSION BOOTSTRAP COMPLETED")
        else:
            self.logger.error("❌ EXTENSION BOOTSTRAP COMPLETED WITH FAILURES")
        self.logger.info(
            f"   Applied: {summary['applied']}, Deferred: {summary['deferred']}, "
            f"Failed: {summary['failed']}, Catalog changes: {summary['mutations']}",
            extra={'custom_dimensions': {**LogContext(run_id=report.run_id).to_dict(), **summary}}
        )
        for action in report.failed:
            self.logger.error(f"   ❌ {action.key}: {action.reason}")
        if report.config_write and report.config_write.restart_required:
            self.logger.warning(
                f"   🔄 Restart required: {report.config_write.path} was updated"
            )
        self.logger.info("=" * 70)
