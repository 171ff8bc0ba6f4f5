"""
Test data builders for VerifierKit testing.

Builds archives and distribution layouts shaped like the ones the JetBrains
services publish.
"""

import io
import tarfile
from pathlib import Path
from typing import Dict, Optional


def build_tar_gz(
    destination: Path, files: Dict[str, str], root: Optional[str] = None
) -> Path:
    """
    Write a .tar.gz archive.

    Args:
        destination: Archive path
        files: Mapping of member path to text content
        root: Optional wrapper directory all members are placed under

    Returns:
        destination
    """
    destination.parent.mkdir(parents=True, exist_ok=True)
    with tarfile.open(destination, "w:gz") as tar:
        for name, content in files.items():
            data = content.encode("utf-8")
            member = tarfile.TarInfo(f"{root}/{name}" if root else name)
            member.size = len(data)
            tar.addfile(member, io.BytesIO(data))
    return destination


def build_tree(root: Path, files: Dict[str, str]) -> Path:
    """Write files (member path -> text content) under root."""
    for name, content in files.items():
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
    return root


IDE_FILES = {
    "build.txt": "IC-202.6397.94",
    "lib/app.jar": "jar",
    "dependencies.txt": "runtimeBuild=1335.42\n",
}

JBR_FILES = {
    "jbr/bin/java": "#!/bin/sh\n",
    "jbr/release": 'JAVA_VERSION="11.0.10"\n',
}
