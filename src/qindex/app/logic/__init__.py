"""App logic package.

Business logic layer for the Streamlit application.
Pure Python/Polars - no Streamlit UI calls.
"""

__all__ = ["chart_loader"]
