"""
Health check page for the Lens Streamlit application.

Append ?format=json for a machine-readable report.
"""

from lens.health import render_health_page

render_health_page()
