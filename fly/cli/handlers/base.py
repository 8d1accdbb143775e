"""Shared result shape for command handlers"""

from typing import Any, Dict


def make_result(success: bool, stdout: str = '', stderr: str = '',
                returncode: int = None) -> Dict[str, Any]:
    """Build the {success, stdout, stderr, returncode} dict every handler returns"""
    if returncode is None:
        returncode = 0 if success else 1
    return {
        'success': success,
        'stdout': stdout,
        'stderr': stderr,
        'returncode': returncode,
    }


def error_result(message: str, returncode: int = 1) -> Dict[str, Any]:
    return make_result(False, stderr=f"Error: {message}\n", returncode=returncode)
