"""
CyberSwarm Simulation Runner
============================
Entry point for running CyberSwarm simulations headlessly.

Provides:
- CLI interface with scenario presets and parameter overrides
- Fixed-timestep driver with metrics collection
- Plots of the statistics over time
"""

import argparse
import json
import logging
from dataclasses import asdict
from typing import Any, Dict, Optional

from tqdm import tqdm

from .config import SimulationConfig, create_default_config
from .metrics import MetricsCollector
from .simulation import ACOSimulation

logger = logging.getLogger(__name__)

SCENARIOS = ["small", "standard", "large", "outbreak", "swarm"]


def create_benchmark_config(scenario: str = "standard") -> SimulationConfig:
    """
    Create configuration for benchmark scenarios.

    Args:
        scenario: One of "small", "standard", "large", "outbreak", "swarm"

    Returns:
        SimulationConfig for the scenario
    """
    if scenario not in SCENARIOS:
        raise ValueError(f"Unknown scenario: {scenario}")

    config = create_default_config()
    config.scenario_name = scenario

    if scenario == "small":
        # Small quick test
        config.network.n_nodes = 12
        config.agents.n_agents = 8

    elif scenario == "standard":
        config.network.n_nodes = 40
        config.agents.n_agents = 50

    elif scenario == "large":
        config.network.n_nodes = 120
        config.network.width = 1600.0
        config.network.height = 1200.0
        config.agents.n_agents = 150

    elif scenario == "outbreak":
        # Aggressive malware, slow evaporation
        config.network.n_nodes = 40
        config.agents.n_agents = 50
        config.infection.malware_spread_rate = 0.25
        config.pheromone.evaporation_rate = 0.05

    elif scenario == "swarm":
        # Dense swarm, strongly pheromone-driven
        config.network.n_nodes = 40
        config.agents.n_agents = 200
        config.pheromone.pheromone_alpha = 2.0
        config.pheromone.heuristic_beta = 1.0

    return config


def run_simulation(
    config: Optional[SimulationConfig] = None,
    n_steps: int = 1000,
    dt: float = 1 / 60,
    seed: Optional[int] = None,
    progress: bool = False
) -> Dict[str, Any]:
    """
    Run a simulation at a fixed timestep.

    Args:
        config: Simulation configuration
        n_steps: Number of update() calls
        dt: Real time per update, as a render loop would measure it
        seed: Random seed (overrides config.seed)
        progress: Show a progress bar

    Returns:
        Results dictionary with history, summary, stats and cycle analytics
    """
    if config is None:
        config = create_default_config()
    if seed is not None:
        config.seed = seed

    sim = ACOSimulation.from_config(config)
    collector = MetricsCollector()

    sim.engage()
    for _ in tqdm(range(n_steps), desc="Simulation", disable=not progress):
        if sim.update(dt):
            collector.record(sim)

    cycle = sim.get_cycle_analytics()
    logger.info(
        f"Run complete: {sim.tick_count} ticks, health {sim.stats.system_health}%, "
        f"{cycle.threats_neutralized}/{cycle.total_infections} threats neutralized"
    )

    return {
        "scenario": config.scenario_name,
        "ticks": sim.tick_count,
        "elapsed": sim.elapsed,
        "history": [asdict(m) for m in collector.history],
        "summary": collector.summary(),
        "final_stats": asdict(sim.stats),
        "cycle": asdict(cycle),
        "final_state": sim.snapshot().to_dict(),
    }


def visualize_simulation(results: Dict[str, Any], output_path: Optional[str] = None):
    """
    Plot the statistics of a run.

    Args:
        results: Results from run_simulation
        output_path: Path to save figure (optional)
    """
    import matplotlib.pyplot as plt

    history = results["history"]
    times = [h["time"] for h in history]

    fig, axes = plt.subplots(2, 2, figsize=(12, 10))

    axes[0, 0].plot(times, [h["system_health"] for h in history], label="System health")
    axes[0, 0].plot(times, [h["infection_rate"] for h in history], label="Infection rate")
    axes[0, 0].set_xlabel("Time (s)")
    axes[0, 0].set_ylabel("%")
    axes[0, 0].set_title("Network Health")
    axes[0, 0].legend()

    axes[0, 1].plot(times, [h["total_pheromones"] for h in history], color="tab:green")
    axes[0, 1].set_xlabel("Time (s)")
    axes[0, 1].set_ylabel("Total pheromone")
    axes[0, 1].set_title("Swarm Signal")

    axes[1, 0].plot(times, [h["n_infected"] for h in history], label="Infected", color="tab:red")
    axes[1, 0].plot(times, [h["n_suspicious"] for h in history], label="Suspicious", color="tab:orange")
    axes[1, 0].plot(times, [h["n_waves"] for h in history], label="Waves", color="tab:purple")
    axes[1, 0].set_xlabel("Time (s)")
    axes[1, 0].set_ylabel("Count")
    axes[1, 0].set_title("Threat Activity")
    axes[1, 0].legend()

    axes[1, 1].plot(times, [h["agent_efficiency"] for h in history], color="tab:blue")
    axes[1, 1].set_xlabel("Time (s)")
    axes[1, 1].set_ylabel("%")
    axes[1, 1].set_title("Agent Efficiency")

    plt.tight_layout()

    if output_path:
        plt.savefig(output_path)
        plt.close(fig)
        print(f"Saved visualization to {output_path}")
    else:
        plt.show()


def print_config_summary(config: SimulationConfig):
    """Print a summary of the configuration"""
    print("\n" + "="*60)
    print("CyberSwarm Configuration Summary")
    print("="*60)
    print(f"Scenario: {config.scenario_name}")
    print(f"Nodes: {config.network.n_nodes}")
    print(f"Agents: {config.agents.n_agents}")
    print(f"Simulation speed: {config.simulation_speed}")
    print()
    print("ACO parameters:")
    print(f"  - alpha: {config.pheromone.pheromone_alpha}")
    print(f"  - beta: {config.pheromone.heuristic_beta}")
    print(f"  - rho: {config.pheromone.evaporation_rate}")
    print(f"  - malware spread rate: {config.infection.malware_spread_rate}")
    print("="*60 + "\n")


def main(argv=None):
    """CLI entry point"""
    parser = argparse.ArgumentParser(
        description="CyberSwarm ACO Cyber-Defense Simulation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Quick run
  python -m cyberswarm.main --scenario small --steps 600

  # Aggressive malware with a plot
  python -m cyberswarm.main --scenario outbreak --steps 3600 --plot run.png

  # Custom ACO parameters, results as JSON
  python -m cyberswarm.main --alpha 1.5 --beta 3 --rho 0.2 --output run.json
        """
    )

    parser.add_argument("--scenario", choices=SCENARIOS, default="standard",
                        help="Benchmark scenario")
    parser.add_argument("--steps", type=int, default=1000, help="Number of frames")
    parser.add_argument("--dt", type=float, default=1 / 60, help="Seconds per frame")
    parser.add_argument("--seed", type=int, help="Random seed")

    parser.add_argument("--n-nodes", type=int, help="Number of network nodes")
    parser.add_argument("--n-agents", type=int, help="Number of ant agents")
    parser.add_argument("--alpha", type=float, help="Pheromone influence exponent")
    parser.add_argument("--beta", type=float, help="Heuristic influence exponent")
    parser.add_argument("--rho", type=float, help="Evaporation rate")
    parser.add_argument("--malware-rate", type=float, help="Malware spread rate")
    parser.add_argument("--speed", type=float, help="Simulation speed multiplier")

    parser.add_argument("--output", type=str, help="Write results JSON here")
    parser.add_argument("--plot", type=str, help="Save statistics plot here")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    config = create_benchmark_config(args.scenario)

    # Apply overrides
    if args.n_nodes is not None:
        config.network.n_nodes = args.n_nodes
    if args.n_agents is not None:
        config.agents.n_agents = args.n_agents
    if args.alpha is not None:
        config.pheromone.pheromone_alpha = args.alpha
    if args.beta is not None:
        config.pheromone.heuristic_beta = args.beta
    if args.rho is not None:
        config.pheromone.evaporation_rate = args.rho
    if args.malware_rate is not None:
        config.infection.malware_spread_rate = args.malware_rate
    if args.speed is not None:
        config.simulation_speed = args.speed

    try:
        config.validate()
    except ValueError as e:
        parser.error(str(e))

    print_config_summary(config)

    results = run_simulation(config=config, n_steps=args.steps, dt=args.dt,
                             seed=args.seed, progress=True)

    stats = results["final_stats"]
    cycle = results["cycle"]
    print("\nSimulation complete!")
    print(f"System health: {stats['system_health']}%")
    print(f"Infection rate: {stats['infection_rate']}%")
    print(f"Agent efficiency: {stats['agent_efficiency']}%")
    print(f"Threats neutralized: {cycle['threats_neutralized']}/{cycle['total_infections']} "
          f"({cycle['efficiency']:.1f}%)")

    if args.output:
        with open(args.output, 'w') as f:
            json.dump(results, f, indent=2)
        print(f"Saved results to {args.output}")

    if args.plot:
        visualize_simulation(results, args.plot)


if __name__ == "__main__":
    main()
