"""Interface shared by module source scanners."""

from abc import ABC, abstractmethod
from typing import List

from jsmodpath.ir import ImportFact


class BaseExtractor(ABC):
    """Turns module source text into import facts."""

    @abstractmethod
    def extract_from_content(self, content: str, source_file: str) -> List[ImportFact]:
        """Scan module text.

        Args:
            content: Module source
            source_file: Path recorded on each fact

        Returns:
            Facts ordered by their position in the source
        """
