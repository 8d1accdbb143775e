#!/usr/bin/env python3
"""
flyctl - jump to indexed directories by name

Maintains an index of every directory under a set of registered roots
and resolves short queries (a basename, optional hints, or a number from
the last result list) to full paths. A shell wrapper function consumes
the single path printed on stdout and changes into it.
"""

import argparse
import sys
from typing import List, Optional, Dict, Any

from fly.cli.handlers import (
    AddRootHandler,
    CountHandler,
    InitHandler,
    ListRootsHandler,
    QueryHandler,
    ReindexHandler,
    RemoveRootHandler,
    ResetHandler,
)
from fly.fly_core.config import ConfigManager
from fly.fly_core.directory_store import SQLiteDirectoryStore, StoreError
from fly.utils import configure_logging, get_logger

__version__ = "1.0.0"

logger = get_logger("flyctl")


class FlyCLI:
    """Main flyctl implementation"""

    def __init__(self, argv: Optional[List[str]] = None,
                 config: Optional[ConfigManager] = None):
        self.argv = argv
        self.config = config
        self.store = None

    def parse_args(self) -> argparse.Namespace:
        """Parse command line arguments"""
        parser = argparse.ArgumentParser(
            prog='flyctl',
            description='fly - jump to indexed directories by name',
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog=self.get_usage_examples()
        )

        commands = parser.add_mutually_exclusive_group()
        commands.add_argument('--add-root', metavar='PATH',
            help='Register a root directory to index')
        commands.add_argument('--remove-root', metavar='PATH',
            help='Unregister a root directory')
        commands.add_argument('--list-roots', action='store_true',
            help='List registered roots')
        commands.add_argument('--reindex', action='store_true',
            help='Rebuild the index for every root')
        commands.add_argument('--count', action='store_true',
            help='Print total indexed directories')
        commands.add_argument('--reset', action='store_true',
            help='Drop all roots and indexed directories')
        commands.add_argument('--init', nargs='?', const='.', metavar='PATH',
            help='Create a default .flyIgnore in PATH (default: current directory)')

        parser.add_argument('--force', action='store_true',
            help='With --init, overwrite an existing .flyIgnore')
        parser.add_argument('-v', '--verbose', action='store_true',
            help='Show debug logs on stderr')
        parser.add_argument('--version', action='version',
            version=f'%(prog)s {__version__}')
        parser.add_argument('tokens', nargs='*', metavar='TOKEN',
            help='Query: [HINT ...] BASENAME, or N to pick from the last list')

        return parser.parse_args(self.argv)

    def get_usage_examples(self) -> str:
        """Get usage examples for help text"""
        return """
Quick Start:
  1. flyctl --add-root ~/code     # Register a root
  2. flyctl --reindex             # Index every directory under it
  3. flyctl src                   # Jump to a directory named 'src'

Examples:
  flyctl src                      # All directories named src
  flyctl api src                  # ... whose path also contains 'api'
  flyctl 2                        # Second entry of the last list
  flyctl --init ~/code            # Write a default .flyIgnore
  flyctl --list-roots             # Show registered roots

Environment Variables:
  FLY_CONFIG_DIR      Config directory (default: ~/.config/fly)
  FLY_DATA_DIR        Index database directory (default: ~/.local/share/fly)
  FLY_LOG_LEVEL       Log level (default: WARNING)
  FLY_LOG_FORMAT      'json' for JSON log lines
  FLY_LOG_FILE        Also log to this file (rotated)
"""

    def run(self) -> int:
        """Main entry point"""
        args = self.parse_args()

        configure_logging(
            log_level='DEBUG' if args.verbose else None,
            default_level='WARNING',
        )

        if args.init is not None:
            # No store needed
            return self.cmd_init(args)

        handler_name = self._command_name(args)
        if handler_name is None and not args.tokens:
            print("Nothing to do. Run 'flyctl --help' for usage", file=sys.stderr)
            return 1

        try:
            self._open()
            if handler_name is None:
                return self.cmd_query(args)
            return getattr(self, handler_name)(args)
        except (StoreError, OSError) as e:
            logger.error(f"flyctl failed: {e}", exc_info=args.verbose)
            print(f"Error: {e}", file=sys.stderr)
            return 1
        finally:
            self._close()

    @staticmethod
    def _command_name(args: argparse.Namespace) -> Optional[str]:
        for name in ('add_root', 'remove_root', 'list_roots', 'reindex', 'count', 'reset'):
            value = getattr(args, name)
            if value not in (None, False):
                return f'cmd_{name}'
        return None

    def _open(self) -> None:
        if self.config is None:
            self.config = ConfigManager()
        self.config.ensure_layout()
        self.store = SQLiteDirectoryStore(self.config.database_path)
        self.config.sync_roots(self.store)

    def _close(self) -> None:
        if self.store is not None:
            self.store.close()
            self.store = None

    @property
    def shared_modules(self) -> Dict[str, Any]:
        return {
            'store': self.store,
            'config': self.config,
            'show_progress': sys.stderr.isatty(),
        }

    def _emit(self, result: Dict[str, Any]) -> int:
        if result['stdout']:
            sys.stdout.write(result['stdout'])
        if result['stderr']:
            sys.stderr.write(result['stderr'])
        return result['returncode']

    # Command handlers
    def cmd_add_root(self, args: argparse.Namespace) -> int:
        """Handle --add-root"""
        return self._emit(AddRootHandler(self.shared_modules).handle([args.add_root]))

    def cmd_remove_root(self, args: argparse.Namespace) -> int:
        """Handle --remove-root"""
        return self._emit(RemoveRootHandler(self.shared_modules).handle([args.remove_root]))

    def cmd_list_roots(self, args: argparse.Namespace) -> int:
        """Handle --list-roots"""
        return self._emit(ListRootsHandler(self.shared_modules).handle([]))

    def cmd_reindex(self, args: argparse.Namespace) -> int:
        """Handle --reindex"""
        return self._emit(ReindexHandler(self.shared_modules).handle([]))

    def cmd_count(self, args: argparse.Namespace) -> int:
        """Handle --count"""
        return self._emit(CountHandler(self.shared_modules).handle([]))

    def cmd_reset(self, args: argparse.Namespace) -> int:
        """Handle --reset"""
        return self._emit(ResetHandler(self.shared_modules).handle([]))

    def cmd_init(self, args: argparse.Namespace) -> int:
        """Handle --init"""
        init_args = [args.init] + (['--force'] if args.force else [])
        return self._emit(InitHandler({}).handle(init_args))

    def cmd_query(self, args: argparse.Namespace) -> int:
        """Handle a jump query"""
        return self._emit(QueryHandler(self.shared_modules).handle(args.tokens))


def main(argv: Optional[List[str]] = None) -> int:
    """Console script entry point"""
    return FlyCLI(argv).run()


if __name__ == "__main__":
    sys.exit(main())
