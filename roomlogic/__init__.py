"""roomlogic: генератор и решатель головоломок о подозреваемых в комнатах."""

from .core.checks import Contradiction, ContradictionKind, find_contradiction
from .core.clue_types import AdjacentToObject, Clue, ClueKind, InFrontOfWindow, InRoom, NearObject, OnObject
from .core.config_loader import GenerationConfig
from .core.enums import Difficulty, Direction, ObjectKind
from .core.errors import GenerationExhausted, PuzzleError
from .core.generator import PuzzleGenerator, generate
from .core.geometry import (
    assassin_id,
    candidate_cells,
    is_blocked,
    placement_valid,
    solution_from_placements,
    victim_cell,
)
from .core.rng import SeededRng
from .core.snapshot import (
    ProgressRecord,
    dump_progress,
    dump_puzzle,
    load_progress,
    load_puzzle,
    puzzle_from_dict,
    puzzle_to_dict,
)
from .core.solver import PuzzleSolver, solve
from .core.types import Board, Coord, PlacementMap, Puzzle, Solution, SolverResult, Suspect, WindowSegment

__version__ = "0.1.0"

__all__ = [
    "generate", "PuzzleGenerator", "GenerationConfig", "GenerationExhausted", "PuzzleError",
    "solve", "PuzzleSolver", "SeededRng",
    "candidate_cells", "is_blocked", "victim_cell", "assassin_id", "placement_valid", "solution_from_placements",
    "find_contradiction", "Contradiction", "ContradictionKind",
    "puzzle_to_dict", "puzzle_from_dict", "dump_puzzle", "load_puzzle",
    "ProgressRecord", "load_progress", "dump_progress",
    "Difficulty", "Direction", "ObjectKind",
    "Clue", "ClueKind", "InRoom", "OnObject", "AdjacentToObject", "NearObject", "InFrontOfWindow",
    "Board", "Coord", "PlacementMap", "Puzzle", "Solution", "SolverResult", "Suspect", "WindowSegment",
]
