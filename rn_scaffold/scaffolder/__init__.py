"""rn-scaffold materializers -- turn the fixed plans into files on disk.

Quick usage::

    from rn_scaffold.scaffolder import ensure_all, write_all

    await ensure_all(config.directories, config.project_root)
    await write_all(config.files, config.project_root, config.templates_dir)
"""

from rn_scaffold.scaffolder.directories import CreationReport, ensure_all
from rn_scaffold.scaffolder.files import WriteReport, copy_template, write_all

__all__ = [
    "CreationReport",
    "WriteReport",
    "copy_template",
    "ensure_all",
    "write_all",
]
