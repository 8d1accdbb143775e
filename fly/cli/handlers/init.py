"""
Init handler: writes a default .flyIgnore file
"""
from typing import Dict, Any
from pathlib import Path
import logging

from fly.cli.handlers.base import make_result, error_result
from fly.fly_core.ignore import IGNORE_FILENAME, init_ignore_file

logger = logging.getLogger('init-handler')


class InitHandler:
    """Handles --init"""

    def __init__(self, shared_modules: Dict[str, Any]):
        self.shared_modules = shared_modules

    def handle(self, args: list) -> Dict[str, Any]:
        """
        Handle init command

        Args:
            args: Optional target directory, optionally followed by '--force'
        """
        try:
            force = '--force' in args
            positional = [a for a in args if a != '--force']
            if len(positional) > 1:
                return error_result("Too many arguments for --init")

            target = Path(positional[0] if positional else '.').expanduser()
            if not target.is_dir():
                return error_result(f"Path '{target}' is not a directory")

            ignore_path = target.resolve() / IGNORE_FILENAME
            if not init_ignore_file(target, force=force):
                return error_result(
                    f"{ignore_path} already exists (use --force to overwrite)"
                )

            logger.info(f"Wrote {ignore_path}")
            return make_result(True, stdout=f"Created {ignore_path}\n")

        except Exception as e:
            logger.error(f"Init error: {e}", exc_info=True)
            return error_result(str(e))
