"""
lens - Photo album sharing web application with Streamlit

A web application for creating, browsing and sharing photo albums with features including:
- Public and private albums of up to five images
- Image storage in Google Cloud Storage
- Album documents stored in DuckDB
- Email and password accounts with public profile pages
- Justified gallery layout with a zoomable lightbox
"""

__version__ = "0.1.0"
__author__ = "lens"
__description__ = "Photo album sharing web application with Streamlit"
