import itertools
from collections import defaultdict


class QueryContext:
    """
    Hands out bound-parameter names for one aggregated query.

    Each prefix (one per filter variant) has its own counter starting at 0,
    so every filter sharing the context gets names that are unique within
    the query: ``ex_checkbox0``, ``ex_checkbox1``, ``ex_text0``...
    Create one context per query; it is not meant to outlive the request.
    """

    def __init__(self):
        self._counters = defaultdict(itertools.count)

    def next_param_name(self, prefix: str) -> str:
        return f"{prefix}{next(self._counters[prefix])}"
