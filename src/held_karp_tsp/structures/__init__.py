from held_karp_tsp.structures.subset_table import CostEntry, SubsetCostTable, NO_PREDECESSOR

__all__ = [
    "CostEntry",
    "SubsetCostTable",
    "NO_PREDECESSOR",
]
