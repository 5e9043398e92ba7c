from .graph import build_graph, run_update_check

__all__ = ["build_graph", "run_update_check"]
