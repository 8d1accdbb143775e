"""
Initialize .flyIgnore files with sensible defaults
"""

from pathlib import Path
from typing import Optional, List
from datetime import datetime

from .constants import IGNORE_FILENAME, DEFAULT_EXCLUSIONS


def generate_header(title: str) -> List[str]:
    """Comment block shared by generated and placeholder ignore files"""
    return [
        f"# {IGNORE_FILENAME} - {title}",
        "#",
        "# Directories matching these patterns are skipped while indexing.",
        "# Syntax follows gitignore: '#' comments, '!' re-includes,",
        "# trailing '/' = directories only, leading '/' = anchored to the root,",
        "# wildcards '*', '?' and '**'.",
    ]


def generate_ignore_content(custom_patterns: Optional[List[str]] = None,
                            include_defaults: bool = True) -> str:
    """
    Generate content for a .flyIgnore file

    Args:
        custom_patterns: Additional patterns to include
        include_defaults: Whether to include the default exclusions

    Returns:
        Content for .flyIgnore file
    """
    lines = generate_header("fly ignore patterns")
    lines.extend([
        f"# Generated on {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
        "",
    ])

    if include_defaults:
        for category, patterns in DEFAULT_EXCLUSIONS.items():
            lines.extend([
                f"# {category}",
                f"# {'-' * len(category)}",
            ])
            lines.extend(patterns)
            lines.append("")

    if custom_patterns:
        lines.extend([
            "# Custom patterns",
            "# ---------------",
        ])
        lines.extend(custom_patterns)
        lines.append("")

    lines.extend([
        "# Examples:",
        "# /scratch/             # Only the top-level scratch directory",
        "# **/generated/         # generated/ at any depth",
        "# !docs/keep/           # Exception - index this one anyway",
        "",
    ])

    return '\n'.join(lines)


def init_ignore_file(path: Path,
                     force: bool = False,
                     include_defaults: bool = True,
                     custom_patterns: Optional[List[str]] = None) -> bool:
    """
    Initialize a .flyIgnore file in the given directory

    Args:
        path: Directory where to create .flyIgnore
        force: Overwrite existing file
        include_defaults: Include the default exclusions
        custom_patterns: Additional patterns to include

    Returns:
        True if file was created, False if already exists and not forced
    """
    ignore_path = Path(path) / IGNORE_FILENAME

    if ignore_path.exists() and not force:
        return False

    content = generate_ignore_content(
        custom_patterns=custom_patterns,
        include_defaults=include_defaults,
    )
    ignore_path.write_text(content, encoding='utf-8')
    return True
