from .errors import ACOError, InvalidInput, InvalidConfig, DegenerateGeometry
from .tsp import TSPInstance, Tour, build_distance_matrix, tour_length
from .pheromone import init_pheromone, decay, reinforce
from .construction import build_tour, roulette_select
from .colony import GenerationResult, run_generation, spawn_rngs
from .optimizer import ACOConfig, ACOResult, AntColonyOptimizer, GenerationReport, solve
from .experiments import run_parameter_sweep, run_repeated_trials, nearest_neighbor_tour
