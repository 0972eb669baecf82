"""
ZIP packaging of finished backup scripts.
"""

import logging
import zipfile
from pathlib import Path


def zip_backup(path: Path, remove_source: bool = True) -> Path:
    """
    Package a backup script into a ZIP archive next to it.

    Args:
        path: The .sql file to package.
        remove_source: Delete the .sql file once archived.

    Returns:
        Path of the .zip file.
    """
    path = Path(path)
    zip_path = path.with_suffix('.zip')

    with zipfile.ZipFile(zip_path, 'w', compression=zipfile.ZIP_DEFLATED) as archive:
        archive.write(path, arcname=path.name)

    if remove_source:
        path.unlink()

    logging.info(f"Archived {path.name} to {zip_path}")
    return zip_path
