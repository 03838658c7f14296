"""
UI Module

Streamlit glue: theme, per-session context access, relationship chart.
"""
