"""
Collapse parsed facts into per-module summaries.

The statement store keeps one statement per checkpoint crossed, so after
exact duplicates are removed the number of facts for a module is the
number of checkpoints completed.
"""

from typing import Dict, Iterable, List

from .catalog import ModuleCatalog
from .schema import ProgressFact, ProgressSummary


def remove_duplicates(facts: Iterable[ProgressFact]) -> List[ProgressFact]:
    """Deduplicate facts while preserving order."""
    seen = set()
    result = []
    for fact in facts:
        if fact not in seen:
            seen.add(fact)
            result.append(fact)
    return result


def count_checkpoints(facts: Iterable[ProgressFact]) -> List[ProgressSummary]:
    """One summary per module id, in first-seen order.

    Name and total come from the last fact seen for the module.
    """
    counts: Dict[str, int] = {}
    last: Dict[str, ProgressFact] = {}
    for fact in facts:
        counts[fact.module_id] = counts.get(fact.module_id, 0) + 1
        last[fact.module_id] = fact

    return [
        ProgressSummary(
            module_id=module_id,
            module_name=last[module_id].module_name,
            checkpoints_completed=count,
            total_checkpoints=last[module_id].total_checkpoints,
        )
        for module_id, count in counts.items()
    ]


def fill_blanks(summaries: List[ProgressSummary], catalog: ModuleCatalog) -> List[ProgressSummary]:
    """Append a zero-progress summary for every catalog module not yet present."""
    present = {s.module_id for s in summaries}
    filled = list(summaries)
    for module in catalog:
        if module.module_id in present:
            continue
        present.add(module.module_id)
        filled.append(ProgressSummary(
            module_id=module.module_id,
            module_name=module.module_name,
            checkpoints_completed=0,
            total_checkpoints=module.total_checkpoints,
        ))
    return filled


def summarize(facts: Iterable[ProgressFact], catalog: ModuleCatalog) -> List[ProgressSummary]:
    """Deduplicate, count, and back-fill one learner's facts."""
    return fill_blanks(count_checkpoints(remove_duplicates(facts)), catalog)
