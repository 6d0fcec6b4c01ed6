"""Q-Index Dashboard: Q-index chart data, storage and views."""
