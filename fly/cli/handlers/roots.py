#!/usr/bin/env python3
"""Handlers for root registration commands"""

from pathlib import Path
from typing import Dict, Any

from fly.cli.handlers.base import make_result, error_result
from fly.fly_core.models import normalize_path
from fly.utils import get_logger

logger = get_logger(__name__)


class AddRootHandler:
    """Registers a directory as a root in the roots file and the store"""

    def __init__(self, shared_modules: Dict[str, Any]):
        self.shared_modules = shared_modules
        self.store = shared_modules['store']
        self.config = shared_modules['config']

    def handle(self, args: list) -> Dict[str, Any]:
        """Handle --add-root"""
        try:
            if not args:
                return error_result("Missing path for --add-root")
            if len(args) > 1:
                return error_result("Too many arguments for --add-root")

            root_path = normalize_path(args[0])
            if not Path(root_path).is_dir():
                return error_result(f"Path '{root_path}' is not a directory")

            self.config.add_root(root_path)
            root_id = self.store.upsert_root(root_path)
            logger.info(f"Registered root {root_path} (id {root_id})")

            return make_result(True, stdout=f"Root registered: {root_path}\n")

        except Exception as e:
            logger.error(f"Add root error: {e}", exc_info=True)
            return error_result(str(e))


class RemoveRootHandler:
    """Unregisters a root; its indexed directories go with it"""

    def __init__(self, shared_modules: Dict[str, Any]):
        self.shared_modules = shared_modules
        self.store = shared_modules['store']
        self.config = shared_modules['config']

    def handle(self, args: list) -> Dict[str, Any]:
        """Handle --remove-root"""
        try:
            if len(args) != 1:
                return error_result("Expected exactly one path for --remove-root")

            root_path = normalize_path(args[0])
            in_config = self.config.remove_root(root_path)
            in_store = self.store.delete_root(root_path)

            if not (in_config or in_store):
                return error_result(f"Root not registered: {root_path}")

            return make_result(True, stdout=f"Root removed: {root_path}\n")

        except Exception as e:
            logger.error(f"Remove root error: {e}", exc_info=True)
            return error_result(str(e))


class ListRootsHandler:
    """Lists registered roots"""

    def __init__(self, shared_modules: Dict[str, Any]):
        self.shared_modules = shared_modules
        self.store = shared_modules['store']
        self.config = shared_modules['config']

    def handle(self, args: list) -> Dict[str, Any]:
        """Handle --list-roots"""
        try:
            roots = self.store.list_roots()
            if not roots:
                return make_result(True, stdout="No roots configured.\n")

            lines = [f"Config directory: {self.config.config_dir}"]
            lines.extend(root.path for root in roots)
            return make_result(True, stdout='\n'.join(lines) + '\n')

        except Exception as e:
            logger.error(f"List roots error: {e}", exc_info=True)
            return error_result(str(e))
