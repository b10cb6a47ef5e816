"""gcue: query Neo4j and AWS Neptune from an interactive console."""

__version__ = "0.1.0"
