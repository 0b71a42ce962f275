"""JSON manifest exporter for discovery results."""

from pathlib import Path
from typing import Any, Dict, Optional
import json
import logging

from jsmodpath.graph.models import DiscoveryResult

logger = logging.getLogger(__name__)


class ManifestExporter:
    """Export a discovery result to a JSON manifest."""

    def build(self, result: DiscoveryResult, output: Optional[str] = None) -> Dict[str, Any]:
        return {
            "metadata": {
                "output": output,
                **result.get_stats(),
                **result.graph.get_stats(),
            },
            "entry_points": list(result.entry_keys),
            "forced": list(result.forced_keys),
            "modules": [module.to_dict() for module in result.modules],
            "aliases": {
                alias: module.key
                for module in result.modules
                for alias in module.aliases
            },
            "nodes": [node.to_dict() for node in result.graph.nodes.values()],
            "edges": [edge.to_dict() for edge in result.graph.edges],
            "unresolved": [item.to_dict() for item in result.unresolved],
            "dynamic_imports": [
                fact.to_dict() for fact in result.imports.get_dynamic_facts()
            ],
        }

    def export(
        self,
        result: DiscoveryResult,
        output_path: Path,
        output: Optional[str] = None,
    ) -> None:
        """Export discovery result to JSON file."""
        data = self.build(result, output)

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w") as f:
            json.dump(data, f, indent=2, default=str)

        logger.info(f"Exported manifest to {output_path}")
