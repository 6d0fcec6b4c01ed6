"""Q-Index Dashboard - Main Entry Point."""

import streamlit as st

st.set_page_config(
    page_title="Q-Index Dashboard",
    page_icon="📈",
    layout="wide",
    initial_sidebar_state="expanded",
)

st.title("📈 Q-Index Dashboard")
st.write("Open **Stock Chart** in the sidebar to browse candlestick and indicator charts.")
