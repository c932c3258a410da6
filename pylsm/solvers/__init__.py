from .velocity_solver import VelocitySolver, OptimiserParameters, solve_velocities
from .sensitivity import Sensitivity
__all__=['VelocitySolver','OptimiserParameters','solve_velocities','Sensitivity']
