"""Reusable UI widgets for SerialTerm.

- StatCard: Caption/value readout for throughput
- PortDiscovery: Serial port detection for the port selector
"""

from .stat_card import StatCard
from .port_discovery import PortDiscovery, PortEntry

__all__ = ['StatCard', 'PortDiscovery', 'PortEntry']
