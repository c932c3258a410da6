from .mesh import Mesh
from .levelset import LevelSet, LevelSetFunction, CircleLevelSet, AffineLevelSet, DomainLevelSet, CompositeLevelSet
from .boundary import Boundary, BoundaryPoint, BoundarySegment
__all__=['Mesh','LevelSet','LevelSetFunction','CircleLevelSet','AffineLevelSet','DomainLevelSet',
         'CompositeLevelSet','Boundary','BoundaryPoint','BoundarySegment']
