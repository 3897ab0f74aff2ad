"""
tiny-qsim: a memory-lean state-vector quantum circuit simulator.

Features:
- Matrix-free gate application: each gate is a basis-to-basis mapping,
  applied group by group to the 2^n amplitude vector in place
- Standard gate catalog plus custom gates written as plain functions
- Builder API: Circuit(2).h(0).cx(0, 1).run()
- Measurement: probabilities, collapse, single-qubit measurement, sampling

Quick Start:
    >>> from tiny_qsim import Circuit
    >>> m = Circuit(2).h(0).cx(0, 1).run()
    >>> m.sample(shots=1000)  # {'00': ~500, '11': ~500}
"""
__version__ = "1.0.0"

from tiny_qsim.basis import BasisState, Qubit, decode, encode, extract, insert
from tiny_qsim.circuit import Circuit, Step
from tiny_qsim.config import SimulatorConfig
from tiny_qsim.drawing import draw_circuit
from tiny_qsim.engine import apply_gate
from tiny_qsim.errors import (
    AlreadySimulatedError,
    ConfigurationError,
    GateDefinitionError,
    NotSimulatedError,
    SimulationError,
    UnknownGateError,
)
from tiny_qsim.gates import NO_CHANGE, CustomGate, StandardGate, custom_gate, standard_gate
from tiny_qsim.measurement import Measurement
from tiny_qsim.progress import LoggingProgress, ProgressReporter
from tiny_qsim.statevector import AmplitudeVector

__all__ = [
    # Core
    "Circuit",
    "Step",
    "AmplitudeVector",
    "Measurement",
    "apply_gate",
    # Basis states
    "BasisState",
    "Qubit",
    "encode",
    "decode",
    "extract",
    "insert",
    # Gates
    "StandardGate",
    "CustomGate",
    "NO_CHANGE",
    "standard_gate",
    "custom_gate",
    # Collaborators
    "ProgressReporter",
    "LoggingProgress",
    "draw_circuit",
    # Configuration and errors
    "SimulatorConfig",
    "SimulationError",
    "ConfigurationError",
    "GateDefinitionError",
    "UnknownGateError",
    "NotSimulatedError",
    "AlreadySimulatedError",
]
