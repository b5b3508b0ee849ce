from __future__ import annotations

import argparse
import gzip
import json
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Any, Dict

import networkx as nx

from Service.itn_modules.gml_codec import GMLCodec
from Service.itn_modules.grade_separation import group_by_node
from Service.itn_modules.graph import GRADE_LEVELS, GraphDocument


def load_document(path: Path) -> GraphDocument:
    opener = gzip.open if path.suffix.lower() == ".gz" else open
    with opener(path, "rb") as stream:
        root = ET.parse(stream).getroot()
    document, _binding = GMLCodec().decode(root)
    return document


def level_metrics(document: GraphDocument, level: int) -> Dict[str, int]:
    raised = document.find_raised_directed_node_refs(level)
    groups = group_by_node(document, raised)
    sizes = [len(links) for links in groups.values()]
    return {
        "raised_refs": len(raised),
        "raised_nodes": len(groups),
        "pairs": sum(1 for s in sizes if s == 2),
        "orphans": sum(1 for s in sizes if s == 1),
        "anomalies": sum(1 for s in sizes if s >= 3),
    }


def evaluate(document: GraphDocument, thresholds: Dict[str, Any]) -> Dict[str, Any]:
    graph = nx.MultiGraph()
    for link in document.links:
        start, end = link.directed_nodes
        graph.add_edge(start.node_id, end.node_id, key=link.fid)

    levels = {str(level): level_metrics(document, level) for level in GRADE_LEVELS}
    metrics = {
        "link_count": len(document.links),
        "road_count": len(document.roads),
        "component_count": nx.number_connected_components(graph) if graph.number_of_nodes() else 0,
        "total_length": float(sum(link.length for link in document.links)),
        "levels": levels,
        "raised_total": sum(item["raised_refs"] for item in levels.values()),
        "anomaly_total": sum(item["anomalies"] for item in levels.values()),
    }

    checks = {
        "max_raised_total": metrics["raised_total"] <= int(thresholds.get("max_raised_total", 999999)),
        "max_anomaly_total": metrics["anomaly_total"] <= int(thresholds.get("max_anomaly_total", 999999)),
        "max_components": metrics["component_count"] <= int(thresholds.get("max_components", 999999)),
    }

    return {"metrics": metrics, "checks": checks, "passed": all(checks.values())}


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Report grade-separated nodes per level without modifying the file.")
    parser.add_argument("--input", required=True, help="Input GML (.gz/.gml/.xml) path")
    parser.add_argument("--thresholds", required=False, help="Optional JSON file for gate thresholds")
    parser.add_argument("--output", required=False, help="Optional output JSON path")
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    document = load_document(Path(args.input))
    thresholds = json.loads(Path(args.thresholds).read_text(encoding="utf-8")) if args.thresholds else {}

    result = evaluate(document, thresholds)
    print(json.dumps(result, ensure_ascii=False, indent=2))

    if args.output:
        Path(args.output).write_text(json.dumps(result, ensure_ascii=False, indent=2), encoding="utf-8")

    return 0 if result["passed"] else 1


if __name__ == "__main__":
    raise SystemExit(main())
