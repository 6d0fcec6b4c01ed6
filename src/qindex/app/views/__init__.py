"""App views package.

Pure rendering functions: Plotly figures and Streamlit widgets.
"""

__all__ = ["charts", "colors", "figures"]
