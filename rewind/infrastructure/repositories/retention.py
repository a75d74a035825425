"""
History Retention

Shared by the store adapters: which revisions to drop so that at most
max_history remain. DEPLOYED revisions and the revision just written are
never dropped, so the cap can be exceeded when nothing else is prunable.
"""

from typing import Iterable, List
from rewind.domain.entities.release import Release, ReleaseStatus


def revisions_to_prune(
    releases: Iterable[Release], max_history: int, keep_revision: int
) -> List[int]:
    if max_history <= 0:
        return []
    ordered = sorted(releases, key=lambda r: r.revision)
    excess = len(ordered) - max_history
    pruned: List[int] = []
    for release in ordered:
        if excess <= 0:
            break
        if release.revision == keep_revision or release.status is ReleaseStatus.DEPLOYED:
            continue
        pruned.append(release.revision)
        excess -= 1
    return pruned
