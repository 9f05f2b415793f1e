"""Type aliases to improve type hint readability."""

from typing import Callable
from jax import Array

type ScalarMap = Callable[[Array], Array]
type VectorMap = Callable[[Array], Array]
type JacobianConstructor = Callable[[Array], Array]
type StepFunction = Callable[[Array], tuple[Array, Array]]
type RHSFunction = Callable[..., Array]
