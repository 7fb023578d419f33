"""Artifact Selection — re-resolves the "currently viewed file" after a file-set swap.

Invariants:
    - Result is always a member of the new artifact set, or None when the set is empty
    - A prior selection survives only by exact path match, and resolves to the NEW artifact
    - Otherwise the first artifact in generation order is selected

Design Decisions:
    - Pure function called synchronously where the set is replaced (commit, hydrate,
      reset), not a subscription: there is no window where the pointer is stale
"""

from genstudio.core.artifacts import Artifact, find_artifact


def resolve_selection(
    prior_path: str | None, artifacts: tuple[Artifact, ...],
) -> Artifact | None:
    """Resolve the selected artifact for a freshly replaced file set. Pure."""
    if not artifacts:
        return None
    if prior_path is not None:
        kept = find_artifact(artifacts, prior_path)
        if kept is not None:
            return kept
    return artifacts[0]
