"""
Asset Pairing

Groups the flat list of files uploaded to a release into artifacts, each
optionally paired with the checksum sidecar that describes it.
"""

from typing import Dict, Iterable, List, Tuple

from relfetch.log_utils import logger

from .checksum import ChecksumKind, classify, strip_suffix
from .interfaces import Artifact, Asset


def pair_assets(assets: Iterable[Asset]) -> List[Artifact]:
    """
    Pair primary release files with their checksum sidecars.

    A sidecar `<name>.sha256` or `<name>.sha1` is attached to the primary file
    named exactly `<name>`. When both kinds exist for one file, SHA-256 is used
    whatever the upload order. Sidecars without a primary file are dropped.

    Parameters:
        assets (Iterable[Asset]): All files uploaded to one release.

    Returns:
        List[Artifact]: One artifact per primary file, in input order.
    """
    primaries: List[Asset] = []
    sidecars: Dict[str, Tuple[ChecksumKind, Asset]] = {}

    for asset in assets:
        kind = classify(asset.name)
        if kind is None:
            primaries.append(asset)
            continue

        base_name = strip_suffix(asset.name, kind)
        existing = sidecars.get(base_name)
        if existing is None or kind.priority > existing[0].priority:
            sidecars[base_name] = (kind, asset)
        elif kind.priority == existing[0].priority:
            # Same name twice; keep the first upload
            logger.debug("Ignoring duplicate checksum sidecar %s", asset.name)

    artifacts = [
        Artifact(asset=primary, checksum=sidecars.pop(primary.name, None))
        for primary in primaries
    ]

    for base_name, (_kind, sidecar) in sidecars.items():
        logger.debug(
            "Dropping checksum sidecar %s: no release file named %s",
            sidecar.name,
            base_name,
        )

    return artifacts
