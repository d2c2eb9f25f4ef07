from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Protocol, Tuple

from rendezvous_sim.simulation.scenario import Scenario

if TYPE_CHECKING:
    from rendezvous_sim.simulation.snapshot import RendezvousSnapshot


class System(Protocol):
    """
    Plugin interface for simulation systems.
    Each system runs per tick and can write to the log.
    """
    name: str

    def on_step(self, t_s: float, scenario: Scenario, log: "SimulationLog") -> None:
        ...


@dataclass
class SimulationLog:
    """
    Stores outputs from a simulation run.
    Keep it simple and serializable.
    """
    # Rendezvous passes: list of (t, snapshot)
    rendezvous: List[Tuple[float, "RendezvousSnapshot"]] = field(default_factory=list)

    # Free-form events
    events: List[Dict[str, Any]] = field(default_factory=list)

    def record_rendezvous(self, t_s: float, snapshot: "RendezvousSnapshot") -> None:
        self.rendezvous.append((t_s, snapshot))

    def record_event(self, t_s: float, kind: str, **details: Any) -> None:
        self.events.append({"t_s": t_s, "kind": kind, **details})


@dataclass
class Engine:
    """
    Fixed-step simulation engine.
    Deterministic replay: given same scenario + dt + start/end => same output.
    """
    dt_s: float
    systems: List[System] = field(default_factory=list)

    def run(self, scenario: Scenario, t_start_s: float, t_end_s: float) -> SimulationLog:
        if self.dt_s <= 0:
            raise ValueError("dt_s must be positive.")
        if t_end_s < t_start_s:
            raise ValueError("t_end_s must be >= t_start_s.")

        log = SimulationLog()
        t = t_start_s

        # Inclusive end if it lands exactly; otherwise last tick < end
        while t <= t_end_s + 1e-9:
            for sys in self.systems:
                sys.on_step(t, scenario, log)

            t += self.dt_s

        return log
