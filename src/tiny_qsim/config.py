"""
Simulator configuration.

Memory for an n-qubit register is 16 * 2^n bytes (complex128):
    20 qubits = 16 MB, 24 qubits = 256 MB, 28 qubits = 4 GB.
"""

from __future__ import annotations

from dataclasses import dataclass

from tiny_qsim.errors import ConfigurationError

DEFAULT_MAX_QUBITS = 24
DEFAULT_TOLERANCE = 1e-10


@dataclass(frozen=True)
class SimulatorConfig:
    """
    Tunables shared by a circuit, its engine calls and its measurement.

    Attributes
    ----------
    max_qubits : int
        Largest register a circuit may allocate.
    tolerance : float
        Probabilities at or below this are reported as zero, and the final
        norm may drift from 1 by this much before a warning is logged.
    check_norm : bool
        Verify the norm of the vector once a run completes.
    """

    max_qubits: int = DEFAULT_MAX_QUBITS
    tolerance: float = DEFAULT_TOLERANCE
    check_norm: bool = True

    def __post_init__(self) -> None:
        if self.max_qubits < 1:
            raise ConfigurationError(f"max_qubits must be positive, got {self.max_qubits}")
        if self.tolerance < 0:
            raise ConfigurationError(f"tolerance must be non-negative, got {self.tolerance}")


DEFAULT_CONFIG = SimulatorConfig()
