"""Package operators for executing install, update and uninstall actions.

This module provides the abstract operator interface and the cargo
implementation.
"""

from capctl.operators.base import ActuatorError, Operator
from capctl.operators.cargo import CargoOperator

__all__ = ["ActuatorError", "CargoOperator", "Operator"]
