"""Price observation records and validation."""

from .models import Observation
from .validators import ObservationValidator, parse_observation

__all__ = ["Observation", "ObservationValidator", "parse_observation"]
