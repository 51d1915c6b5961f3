"""
lbm2d - Lattice Boltzmann fluid dynamics on a periodic 2D grid.

D2Q9 lattice, BGK collision, composable bounce-back and inflow boundary
conditions, numba-parallel streaming/collision/boundary phases.
"""

from .lattice import Direction, D2Q9
from .grid import StructuredGrid
from .geometry import Circle, HalfPlane, Rectangle
from .boundary import BoundaryHandler, BoundaryType, Condition
from .collision import SingleRelaxationTime, TwoRelaxationTime
from .physics import NavierStokes
from .solver import Solver

__version__ = "0.1.0"

__all__ = [
    "Direction",
    "D2Q9",
    "StructuredGrid",
    "Circle",
    "HalfPlane",
    "Rectangle",
    "BoundaryHandler",
    "BoundaryType",
    "Condition",
    "SingleRelaxationTime",
    "TwoRelaxationTime",
    "NavierStokes",
    "Solver",
]
