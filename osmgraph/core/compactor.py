import logging

from .node_table import NodeTable

logger = logging.getLogger(__name__)


def assign_compact_ids(node_table: NodeTable) -> int:
    """
    Nadaje gęste id 0..n-1 tylko użytym węzłom, w kolejności iteracji tabeli.
    Nieużyte węzły zostają z compact_id=None. Zwraca liczbę nadanych id.
    """
    next_id = 0
    for node in node_table:
        if not node.used:
            node.compact_id = None
            continue
        node.compact_id = next_id
        next_id += 1

    logger.debug("Nadano %d nowych id węzłów", next_id)
    return next_id
