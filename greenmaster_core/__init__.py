"""
GreenMaster core package.

Field logs, golf-course relationship intelligence and AI summaries for a
golf-course-services vendor. Everything here runs without Streamlit except
``greenmaster_core.ui`` and ``greenmaster_core.errors.handlers``.
"""

__version__ = "1.0.0"
