"""Allocators package - column width allocation strategies."""
from .errors import (
    AllocationError,
    AllocationOverflowError,
    FixedWidthError,
    RowLengthError,
)
from .base import WidthAllocation, WidthAllocator
from .evenly import EvenWidthAllocator
from .minimum import MinimumContentAllocator, longest_word
from .weighting import WeightedAverageAllocator

STRATEGIES = {
    EvenWidthAllocator.name: EvenWidthAllocator,
    MinimumContentAllocator.name: MinimumContentAllocator,
    WeightedAverageAllocator.name: WeightedAverageAllocator,
}

__all__ = [
    "AllocationError",
    "AllocationOverflowError",
    "EvenWidthAllocator",
    "FixedWidthError",
    "MinimumContentAllocator",
    "RowLengthError",
    "STRATEGIES",
    "WeightedAverageAllocator",
    "WidthAllocation",
    "WidthAllocator",
    "longest_word",
]
