"""sankey-flow: Sankey flow-diagram layout from tabular source/target/value rows."""

__version__ = "0.1.0"
