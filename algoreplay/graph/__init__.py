"""
graph/
------
Graph model shared by the graph steppers and the input helpers.

    from algoreplay.graph import Graph, Edge
"""

from algoreplay.graph.graph import Graph, Edge

__all__ = ["Graph", "Edge"]
