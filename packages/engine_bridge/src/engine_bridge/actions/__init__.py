"""
Actions - delivery of engine results to external HTTP endpoints.
"""

from engine_bridge.actions.dispatcher import ActionDispatcher, DispatchOutcome
from engine_bridge.actions.listener import ActionListener

__all__ = ["ActionDispatcher", "ActionListener", "DispatchOutcome"]
