"""
Checksum verification for Kometa Images.

Bundled fonts and base images are pinned by a YAML manifest of SHA256
checksums (relative path -> hex digest) so a run never draws with a
corrupted or silently replaced asset.
"""

import hashlib
from pathlib import Path
from typing import Dict, Iterable, List

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .constants import logger
from .errors import ChecksumError

CHUNK_SIZE = 1024 * 1024


def compute_checksum(path: Path) -> str:
    """SHA256 hex digest of a file, read in chunks."""
    digest = hashlib.sha256()
    with Path(path).open('rb') as f:
        for chunk in iter(lambda: f.read(CHUNK_SIZE), b''):
            digest.update(chunk)
    return digest.hexdigest()


def build_manifest(root: Path, patterns: Iterable[str] = ('**/*',)) -> Dict[str, str]:
    """Checksum every file under root matching patterns."""
    root = Path(root)
    manifest: Dict[str, str] = {}
    for pattern in patterns:
        for path in sorted(root.glob(pattern)):
            if path.is_file():
                manifest[path.relative_to(root).as_posix()] = compute_checksum(path)
    return manifest


def write_manifest(path: Path, manifest: Dict[str, str]) -> None:
    """Write a manifest as YAML."""
    yaml_parser = YAML()
    yaml_parser.default_flow_style = False
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open('w', encoding='utf-8') as f:
        yaml_parser.dump(dict(sorted(manifest.items())), f)


def load_manifest(path: Path) -> Dict[str, str]:
    """Read a manifest written by write_manifest."""
    yaml_parser = YAML(typ='safe')
    try:
        with Path(path).open('r', encoding='utf-8') as f:
            data = yaml_parser.load(f)
    except OSError as e:
        raise ChecksumError(f"Cannot read checksum manifest {path}: {e}") from e
    except YAMLError as e:
        raise ChecksumError(f"Invalid YAML in checksum manifest {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ChecksumError(f"Checksum manifest {path} must contain a mapping")
    return {str(k): str(v) for k, v in data.items()}


def verify_checksums(root: Path, manifest: Dict[str, str]) -> List[str]:
    """
    Compare files under root against manifest.

    Returns the relative paths that are missing or whose checksum differs.
    """
    root = Path(root)
    bad: List[str] = []

    for rel_path, expected in sorted(manifest.items()):
        path = root / rel_path
        if not path.is_file():
            logger.error(f"CHECKSUM_MISSING path={rel_path}")
            bad.append(rel_path)
            continue
        actual = compute_checksum(path)
        if actual != expected:
            logger.error(f"CHECKSUM_MISMATCH path={rel_path} expected={expected[:12]} actual={actual[:12]}")
            bad.append(rel_path)

    if not bad:
        logger.info(f"CHECKSUMS_OK files={len(manifest)}")
    return bad
