"""Runtime – processor lifecycle."""
from order_views.runtime.processor import Processor, main, run_forever, start_processor, stop_processor

__all__ = ["Processor", "main", "run_forever", "start_processor", "stop_processor"]
