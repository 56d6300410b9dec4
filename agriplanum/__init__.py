"""AgriPlanum — farm planning API with agronomic calculators."""

__version__ = "0.1.0"
