from __future__ import annotations
import json
from pathlib import Path
from typing import Dict, Any
from ..config import SimConfig
from ..runtime.cache import LFUCache
from .formatting import format_cache
from . import viz

def generate_report_json(cache: LFUCache, config: SimConfig, stats: Dict[str, Any]) -> Dict[str, Any]:
    """Generates a JSON-compatible dictionary from the cache state."""
    lines = cache.snapshot()
    report_data = {
        "geometry": {
            "index_bits": cache.index_bits,
            "tag_bits": cache.tag_bits,
            "offset_bits": cache.offset_bits,
            "associativity": cache.associativity,
            "num_sets": cache.num_sets,
            "line_size": cache.line_size,
        },
        "stats": dict(stats),
        "occupancy": f"{sum(1 for l in lines if l['valid']) / len(lines):.2%}",
        "lines": lines,
        "dump": format_cache(cache),
        "config": config.__dict__,
    }
    report_data["stats"]["hit_rate"] = f"{stats.get('hit_rate', 0.0):.2%}"
    return report_data

def generate_report(cache: LFUCache, config: SimConfig, stats: Dict[str, Any]):
    """Generates all report artifacts."""
    report_data = generate_report_json(cache, config, stats)
    output_dir = Path(config.report_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    with open(output_dir / "report.json", "w") as f:
        json.dump(report_data, f, indent=4)

    viz.export_frequency_heatmap(report_data['lines'], str(output_dir / "frequency.html"))

    print(viz.export_occupancy_ascii(report_data['lines']))

    print(f"Reports generated in {output_dir.absolute()}")

    print("\nAccess Stats:")
    for key, value in report_data['stats'].items():
        print(f"  {key:<10}: {value}")
    print(f"\nOccupancy: {report_data['occupancy']}")
