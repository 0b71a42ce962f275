"""Storage for import facts gathered during discovery."""

from collections import defaultdict
from typing import Dict, List

from .fact import ImportFact, ImportKind


class ImportStore:
    """Import facts in scan order, indexed by kind."""

    def __init__(self) -> None:
        self.facts: List[ImportFact] = []
        self._facts_by_kind: Dict[ImportKind, List[ImportFact]] = defaultdict(list)

    def add_fact(self, fact: ImportFact) -> None:
        self.facts.append(fact)
        self._facts_by_kind[fact.kind].append(fact)

    def add_facts(self, facts: List[ImportFact]) -> None:
        """Add multiple facts to the store."""
        for fact in facts:
            self.add_fact(fact)

    def get_facts_by_kind(self, kind: ImportKind) -> List[ImportFact]:
        return self._facts_by_kind.get(kind, [])

    def get_static_facts(self) -> List[ImportFact]:
        return [f for f in self.facts if f.is_static]

    def get_dynamic_facts(self) -> List[ImportFact]:
        return self.get_facts_by_kind(ImportKind.DYNAMIC_IMPORT)

    def get_stats(self) -> Dict[str, int]:
        """Get statistics about stored facts."""
        return {
            "total_imports": len(self.facts),
            "importing_files": len({f.source_file for f in self.facts}),
            "unique_specifiers": len({f.specifier for f in self.facts}),
            "static_imports": len(self.get_static_facts()),
            "dynamic_imports": len(self.get_dynamic_facts()),
        }
