#!/usr/bin/env python3
"""Handlers for index maintenance commands (reindex, count, reset)"""

from typing import Dict, Any

from fly.cli.handlers.base import make_result, error_result
from fly.fly_core.indexer import DirectoryIndexer
from fly.utils import get_logger

logger = get_logger(__name__)


class ReindexHandler:
    """Rebuilds the directory index for every registered root"""

    def __init__(self, shared_modules: Dict[str, Any]):
        self.shared_modules = shared_modules
        self.store = shared_modules['store']
        self.config = shared_modules['config']
        self.show_progress = shared_modules.get('show_progress', False)

    def handle(self, args: list) -> Dict[str, Any]:
        """Handle --reindex"""
        try:
            if not self.store.list_roots():
                return error_result("No roots configured. Add one with --add-root first.")

            indexer = DirectoryIndexer(self.store, self.config)
            reports = indexer.reindex_all_roots(show_progress=self.show_progress)

            stdout_lines = []
            stderr_lines = []
            for report in reports:
                if report.missing:
                    self.config.remove_root(report.root.path)
                    stderr_lines.append(
                        f"Skipping root '{report.root.path}': not a directory or missing (unregistered)"
                    )
                    continue
                stdout_lines.append(f"Indexed {report.indexed:,} directories under {report.root.path}")
                if report.errors:
                    stderr_lines.append(
                        f"  {len(report.errors)} director{'y' if len(report.errors) == 1 else 'ies'} "
                        f"could not be read under {report.root.path}"
                    )

            return make_result(
                True,
                stdout=''.join(line + '\n' for line in stdout_lines),
                stderr=''.join(line + '\n' for line in stderr_lines),
            )

        except Exception as e:
            logger.error(f"Reindex error: {e}", exc_info=True)
            return error_result(str(e))


class CountHandler:
    """Prints the number of indexed directories"""

    def __init__(self, shared_modules: Dict[str, Any]):
        self.shared_modules = shared_modules
        self.store = shared_modules['store']

    def handle(self, args: list) -> Dict[str, Any]:
        """Handle --count"""
        try:
            count = self.store.count_directories()
            return make_result(True, stdout=f"Total indexed directories: {count:,}\n")
        except Exception as e:
            logger.error(f"Count error: {e}", exc_info=True)
            return error_result(str(e))


class ResetHandler:
    """Drops every root and indexed directory from the store"""

    def __init__(self, shared_modules: Dict[str, Any]):
        self.shared_modules = shared_modules
        self.store = shared_modules['store']

    def handle(self, args: list) -> Dict[str, Any]:
        """Handle --reset"""
        try:
            removed = self.store.reset()
            return make_result(True, stdout=f"Reset complete; removed {removed:,} indexed entries.\n")
        except Exception as e:
            logger.error(f"Reset error: {e}", exc_info=True)
            return error_result(str(e))
