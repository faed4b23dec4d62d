"""Intersections, unions and complements of sorted VCF/BCF files."""

from .config import Config, SetOperation, CollapsePolicy
from . import reader
from . import isec
from . import utils

__version__ = '0.1.0'
