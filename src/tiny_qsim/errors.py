"""
Exception types raised by tiny-qsim.

Every error the package raises derives from ``SimulationError`` so callers
can tell simulator failures from anything else. Configuration problems are
also ``ValueError`` subclasses, which keeps the builder API compatible with
code that catches the builtin.
"""


class SimulationError(Exception):
    """Base class for all tiny-qsim errors."""


class ConfigurationError(SimulationError, ValueError):
    """Invalid register size, gate arity, wire placement or parameters."""


class GateDefinitionError(ConfigurationError):
    """A custom gate returned a column the engine cannot apply."""


class UnknownGateError(ConfigurationError, KeyError):
    """Gate name not present in the standard catalog."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the message readable.
        return str(self.args[0]) if self.args else ""


class NotSimulatedError(SimulationError):
    """Results were requested before ``Circuit.run()``."""


class AlreadySimulatedError(SimulationError):
    """The circuit was modified or re-run after simulation started."""
