"""
Configuration for the Mahalanobis-Taguchi System engine.
"""

from dataclasses import dataclass
from typing import Optional

# Decibel convention of Taguchi SN ratios
DEFAULT_SN_LOG_BASE = 10.0


@dataclass
class MTSConfig:
    """Configuration for distance computation and variable selection."""
    # Orthogonal array level coding
    included_level: float = 1.0      # Level meaning "variable included"
    level_tolerance: float = 1e-6    # Tolerance when matching a design entry

    # Signal-to-noise ratio
    sn_log_base: float = DEFAULT_SN_LOG_BASE  # -10 * log_b(mean(1/D)), decibels

    # Run-level parallelism
    parallel: bool = True
    max_workers: Optional[int] = None

    # Resource monitoring
    memory_limit_gb: float = 8.0

    def __post_init__(self):
        """Validate configuration."""
        if self.level_tolerance <= 0:
            raise ValueError("level_tolerance must be positive")
        if self.sn_log_base <= 0 or self.sn_log_base == 1:
            raise ValueError("sn_log_base must be positive and different from 1")
        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        if self.memory_limit_gb <= 0:
            raise ValueError("memory_limit_gb must be positive")

    def is_included(self, level: float) -> bool:
        """Whether a design entry codes the variable as included."""
        return abs(level - self.included_level) < self.level_tolerance
