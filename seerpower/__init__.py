"""
seerpower: power estimation for association tools by population subsampling

Draws case/control subsamples with a simulated genetic effect, runs an
external association tool (seer by default) on each, and tabulates how
often the effect is detected across odds ratios and sample sizes.
"""

__version__ = "0.1.0"
__author__ = "seerpower Development Team"

from .config import SweepConfig
from .sampling.reservoir import reservoir_sample, InsufficientPopulationError
from .phenotype.model import prob_case_given_absent, prob_case_given_present
from .phenotype.generator import generate_phenotype
from .matrix.projection import project_structure
from .association.external import ExternalAssociationTool
from .pipelines.trial import TrialRunner
from .pipelines.power import PowerSweepPipeline
from .utils.stats import estimate_power

__all__ = [
    'SweepConfig',
    'reservoir_sample',
    'InsufficientPopulationError',
    'prob_case_given_absent',
    'prob_case_given_present',
    'generate_phenotype',
    'project_structure',
    'ExternalAssociationTool',
    'TrialRunner',
    'PowerSweepPipeline',
    'estimate_power',
]
