"""Utils package - Utility modules."""
from .units import to_points
from .validator import AllocationValidator
from .table_loader import load_table, table_from_dict

__all__ = ["AllocationValidator", "load_table", "table_from_dict", "to_points"]
