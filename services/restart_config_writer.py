# ============================================================================
# RESTART CONFIGURATION WRITER
# ============================================================================
# STATUS: Services - Server configuration file updates
# PURPOSE: Add preload libraries (and settings) that restart-gated extensions need
# ============================================================================
"""
Restart Configuration Writer.

Restart-gated extensions (pg_cron) can only be created after the server
loaded their library at startup. This writer puts the library into
shared_preload_libraries so the next start picks it up; the extension
itself stays DEFERRED until a run with the restart flag set.

File rules (postgresql.conf syntax):
    - shared_preload_libraries is a set union. Existing entries keep their
      order; missing ones are appended in sorted order.
    - The last active (uncommented) assignment of a key wins in PostgreSQL,
      so that line is the one replaced. Without one, a line is appended.
    - Nothing is written when the file already has every value.
    - Writes go to a temp file in the same directory, then os.replace().

Exports:
    RestartConfigWriter: Config file updater
    parse_library_list: shared_preload_libraries value parser
"""

import os
import re
import tempfile
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple, Union

from config.defaults import BootstrapDefaults
from core.models import ConfigWriteResult, ExtensionSpec, TEMPLATE_DATABASE_PLACEHOLDER
from exceptions import ConfigWriteError
from util_logger import LoggerFactory, ComponentType


PRELOAD_KEY = "shared_preload_libraries"

# key = value  |  key value  (the '=' is optional in postgresql.conf)
_ASSIGNMENT = re.compile(r"^\s*(?P<key>[A-Za-z_][A-Za-z0-9_.]*)\s*(=\s*|\s+)(?P<rest>.*)$")
_QUOTED = re.compile(r"'((?:[^'\\]|''|\\.)*)'")


def _parse_value(rest: str) -> str:
    """Value part of an assignment, without quotes or trailing comment."""
    rest = rest.strip()
    if rest.startswith("'"):
        match = _QUOTED.match(rest)
        if match:
            return match.group(1).replace("''", "'")
        return rest.strip("'")
    return rest.split("#", 1)[0].strip()


def _format_value(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def parse_library_list(value: str) -> List[str]:
    """Split a shared_preload_libraries value into library names."""
    libraries: List[str] = []
    for part in value.split(","):
        part = part.strip().strip('"')
        if part and part not in libraries:
            libraries.append(part)
    return libraries


class RestartConfigWriter:
    """
    Updates the server configuration file for restart-gated extensions.
    """

    def __init__(self, config_path: Union[str, Path]):
        self.config_path = Path(config_path)
        self.logger = LoggerFactory.create_logger(ComponentType.SERVICE, "RestartConfigWriter")

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def write(
        self,
        extensions: Iterable[ExtensionSpec],
        template_database: str = BootstrapDefaults.TEMPLATE_DATABASE,
    ) -> ConfigWriteResult:
        """
        Ensure the configuration file carries what the given extensions need.

        Extensions that are not restart-gated are ignored; with none left the
        file is not touched at all.

        Args:
            extensions: Extensions of this run (typically the resolved order)
            template_database: Substituted for TEMPLATE_DATABASE_PLACEHOLDER in
                setting values (pg_cron runs its scheduler in that database)

        Returns:
            ConfigWriteResult (changed=False when the file already matched)

        Raises:
            ConfigWriteError: The file cannot be read or written
        """
        gated = [spec for spec in extensions if spec.requires_restart]
        if not gated:
            return ConfigWriteResult(path=str(self.config_path))

        required_libraries = sorted({spec.preload_library for spec in gated if spec.preload_library})
        settings: Dict[str, str] = {}
        for spec in sorted(gated, key=lambda s: s.name):
            settings.update(
                (key, value.replace(TEMPLATE_DATABASE_PLACEHOLDER, template_database))
                for key, value in spec.server_settings.items()
            )
        settings.pop(PRELOAD_KEY, None)

        lines = self._read_lines()

        existing_value = self._current_value(lines, PRELOAD_KEY)
        existing = parse_library_list(existing_value) if existing_value is not None else []
        merged = existing + [lib for lib in required_libraries if lib not in existing]

        keys_written: List[str] = []
        if merged != existing:
            lines = self._set_value(lines, PRELOAD_KEY, ",".join(merged))
            keys_written.append(PRELOAD_KEY)

        for key, value in settings.items():
            if self._current_value(lines, key) != value:
                lines = self._set_value(lines, key, value)
                keys_written.append(key)

        if keys_written:
            self._write_lines(lines)
            self.logger.info(
                f"📝 Updated {self.config_path}: {', '.join(keys_written)} "
                f"(restart required, preload = {','.join(merged)})"
            )
        else:
            self.logger.debug(f"{self.config_path} already up to date")

        return ConfigWriteResult(
            path=str(self.config_path),
            changed=bool(keys_written),
            preload_libraries=merged,
            keys_written=keys_written,
        )

    # ------------------------------------------------------------------
    # File handling
    # ------------------------------------------------------------------

    def _read_lines(self) -> List[str]:
        try:
            # Non-UTF-8 bytes (Latin-1 comments) survive the round trip unchanged
            return self.config_path.read_text(encoding="utf-8", errors="surrogateescape").splitlines()
        except FileNotFoundError:
            # initdb always creates the file; a missing one is created fresh
            return []
        except OSError as e:
            raise ConfigWriteError(
                f"cannot read {self.config_path}: {e}", path=str(self.config_path)
            ) from e

    def _write_lines(self, lines: List[str]) -> None:
        directory = self.config_path.parent
        tmp_path: Optional[str] = None
        try:
            fd, tmp_path = tempfile.mkstemp(
                prefix=f".{self.config_path.name}.", suffix=".tmp", dir=str(directory)
            )
            with os.fdopen(fd, "w", encoding="utf-8", errors="surrogateescape") as f:
                f.write("\n".join(lines) + "\n")
            if self.config_path.exists():
                os.chmod(tmp_path, self.config_path.stat().st_mode & 0o777)
            os.replace(tmp_path, self.config_path)
            tmp_path = None
        except OSError as e:
            raise ConfigWriteError(
                f"cannot write {self.config_path}: {e}", path=str(self.config_path)
            ) from e
        finally:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)

    # ------------------------------------------------------------------
    # Line editing
    # ------------------------------------------------------------------

    @staticmethod
    def _find_last(lines: List[str], key: str) -> Tuple[Optional[int], Optional[str]]:
        """Index and parsed value of the last active assignment of key."""
        index, value = None, None
        for i, line in enumerate(lines):
            match = _ASSIGNMENT.match(line)
            if match and match.group("key").lower() == key.lower():
                index, value = i, _parse_value(match.group("rest"))
        return index, value

    def _current_value(self, lines: List[str], key: str) -> Optional[str]:
        return self._find_last(lines, key)[1]

    def _set_value(self, lines: List[str], key: str, value: str) -> List[str]:
        new_line = f"{key} = {_format_value(value)}"
        index, _ = self._find_last(lines, key)
        lines = list(lines)
        if index is None:
            lines.append(new_line)
        else:
            lines[index] = new_line
        return lines
