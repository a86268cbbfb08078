"""Building blocks for games: vector math, collision, navmesh pathfinding, animation, behavior trees, input, metrics and networking."""

__version__ = "0.1.0"