from .calendar_tools import CalendarTools
from .volume_aggregator import VolumeAggregator

__all__ = ["CalendarTools", "VolumeAggregator"]
