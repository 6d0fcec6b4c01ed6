# Define a static color class for consistent use across the app

from qindex.analysis.chart_data import NEGATIVE_COLOR, POSITIVE_COLOR


class Colors:
    # Candles
    candle_up = "#26a69a"  # Teal green
    candle_down = "#ef5350"  # Soft red

    # Indicator lines
    trend_q = "#2196f3"  # Material blue
    fq = "#ff9800"  # Material orange

    # qv1 histogram, shared with the chart data layer
    qv1_positive = POSITIVE_COLOR
    qv1_negative = NEGATIVE_COLOR

    # Chart chrome (dark theme)
    background = "#1e1e28"
    grid = "rgba(255, 255, 255, 0.1)"
    text = "#dddddd"


LINE_COLOR_MAP = {
    "trend_q": Colors.trend_q,
    "fq": Colors.fq,
}

# FQ is always drawn dashed
LINE_DASH_MAP = {
    "trend_q": "solid",
    "fq": "dash",
}

LINE_TITLES = {
    "trend_q": "Trend Q",
    "fq": "FQ",
}
