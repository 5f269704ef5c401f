"""
XML codec - single document with nested node and edge elements.

Layout::

    <graph>
      <nodes>
        <node id="c1" type="claim"><label>Tax cuts raise growth</label></node>
      </nodes>
      <edges>
        <edge source="e1" target="c1"><label>supports</label></edge>
      </edges>
    </graph>

Identity and category fields are attributes; label text is element content.
An edge has one <label> child per label.

Author: GraphVault contributors
License: MIT
"""

import xml.etree.ElementTree as ET
from typing import Any, Dict, Optional

from graphvault_core.codecs.base import GraphCodec
from graphvault_core.exceptions import CodecSyntaxError
from graphvault_core.models import Graph

ROOT_TAG = "graph"


class XMLCodec(GraphCodec):
    """Encode/decode graphs as XML documents. Extra node fields are not written."""

    format_name = "xml"
    extensions = (".xml",)

    def parse(self, data: bytes, source: str = "<bytes>") -> Dict[str, Any]:
        try:
            root = ET.fromstring(data)
        except ET.ParseError as e:
            line, column = e.position
            raise CodecSyntaxError(
                f"Invalid XML in {source}: {e}",
                details={"source": source, "line": line, "column": column},
                original_exception=e,
            ) from e

        if root.tag != ROOT_TAG:
            raise CodecSyntaxError(
                f"{source} has root element <{root.tag}>, expected <{ROOT_TAG}>",
                error_code="CODEC_002",
                details={"source": source, "root": root.tag},
            )

        nodes = [
            {
                "id": elem.get("id"),
                "type": elem.get("type"),
                "label": self._label_text(elem),
            }
            for elem in root.findall("./nodes/node")
        ]
        edges = [
            {
                "source": elem.get("source"),
                "target": elem.get("target"),
                "label": [label.text or "" for label in elem.findall("label")] or None,
            }
            for elem in root.findall("./edges/edge")
        ]
        return {"nodes": nodes, "edges": edges}

    def encode(self, graph: Graph) -> bytes:
        root = ET.Element(ROOT_TAG)

        nodes_elem = ET.SubElement(root, "nodes")
        for node in graph.nodes:
            node_elem = ET.SubElement(nodes_elem, "node")
            node_elem.set("id", node.id)
            node_elem.set("type", node.type)
            ET.SubElement(node_elem, "label").text = node.label

        edges_elem = ET.SubElement(root, "edges")
        for edge in graph.edges:
            edge_elem = ET.SubElement(edges_elem, "edge")
            edge_elem.set("source", edge.source)
            edge_elem.set("target", edge.target)
            for label in edge.label:
                ET.SubElement(edge_elem, "label").text = label

        if self.pretty_print:
            ET.indent(root, space="  ")

        return ET.tostring(root, encoding="utf-8", xml_declaration=True)

    @staticmethod
    def _label_text(elem: ET.Element) -> Optional[str]:
        label = elem.find("label")
        if label is None:
            return None
        return label.text or ""
