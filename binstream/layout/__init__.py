"""Binstream layout definitions: parsing, size calculation and record codecs."""

from .codecs import LayoutCodecs as LayoutCodecs
from .codecs import RecordCodec as RecordCodec
from .parser import *
from .sizes import RecordSizeInfo as RecordSizeInfo
from .sizes import SizeCalculator as SizeCalculator
from .sizes import SizeInfo as SizeInfo
from .sizes import SizeKind as SizeKind
from .sizes import calculate_sizes as calculate_sizes
from .types import *
