"""
Health checks for the Lens application.

Checks the album database, the image bucket and the environment
configuration, and aggregates them into an overall status together with
the counts of errors handled since the process started.
"""

import json
import platform
import time
from typing import Any

import streamlit as st

from lens import __version__
from lens.config import get_environment, get_required_env
from lens.error_handling import error_handler
from lens.logging_config import get_logger
from lens.services.storage import get_storage_service
from lens.services.store import get_lens_store

logger = get_logger(__name__)

REQUIRED_ENV_VARS = ["GOOGLE_CLOUD_PROJECT", "GCS_PHOTOS_BUCKET"]


def _result(status: str, message: str, **extra: Any) -> dict[str, Any]:
    return {"status": status, "message": message, "timestamp": time.time(), **extra}


def check_database_health() -> dict[str, Any]:
    """Check that the album database opens and carries the expected tables."""
    try:
        store = get_lens_store()
        if not store.db_manager.verify_schema():
            return _result("unhealthy", "Database schema is incomplete", path=store.db_path)
        return _result("healthy", "Database connection successful", path=store.db_path)
    except Exception as e:
        logger.error("database_health_check_failed", error=str(e))
        return _result("unhealthy", f"Database connection failed: {e}")


def check_storage_health() -> dict[str, Any]:
    """Check that the image bucket is reachable."""
    try:
        storage_service = get_storage_service()
        if not storage_service.check_bucket_exists():
            return _result("unhealthy", f"Bucket not found: {storage_service.photos_bucket_name}")
        return _result(
            "healthy",
            f"Storage connection successful to bucket: {storage_service.photos_bucket_name}",
            bucket=storage_service.photos_bucket_name,
        )
    except Exception as e:
        logger.error("storage_health_check_failed", error=str(e))
        return _result("unhealthy", f"Storage connection failed: {e}")


def check_environment_health() -> dict[str, Any]:
    """Check that the required configuration is present."""
    missing_vars = []
    for var in REQUIRED_ENV_VARS:
        try:
            get_required_env(var)
        except ValueError:
            missing_vars.append(var)

    if missing_vars:
        return _result(
            "unhealthy",
            f"Missing environment variables: {', '.join(missing_vars)}",
            missing_vars=missing_vars,
        )
    return _result("healthy", "Environment configuration is valid", environment=get_environment())


def get_application_info() -> dict[str, Any]:
    return {
        "name": "lens",
        "version": __version__,
        "environment": get_environment(),
        "python_version": platform.python_version(),
        "timestamp": time.time(),
    }


def perform_health_check() -> dict[str, Any]:
    """Run every check and report the overall status."""
    logger.info("health_check_started")
    start_time = time.perf_counter()

    checks = {
        "database": check_database_health(),
        "storage": check_storage_health(),
        "environment": check_environment_health(),
    }
    unhealthy_services = [service for service, result in checks.items() if result["status"] != "healthy"]

    health_response = {
        "status": "unhealthy" if unhealthy_services else "healthy",
        "timestamp": time.time(),
        "duration_ms": round((time.perf_counter() - start_time) * 1000, 2),
        "application": get_application_info(),
        "checks": checks,
        "error_counts": error_handler.get_error_statistics(),
    }
    if unhealthy_services:
        health_response["unhealthy_services"] = unhealthy_services

    logger.info(
        "health_check_completed",
        status=health_response["status"],
        duration_ms=health_response["duration_ms"],
        unhealthy_services=unhealthy_services,
    )
    return health_response


def health_check_json() -> str:
    return json.dumps(perform_health_check(), indent=2)


def render_health_page() -> None:
    """Render the health check page."""
    st.set_page_config(page_title="Health Check - Lens", page_icon="🩺", layout="wide")
    st.title("🩺 Health Check")

    if st.query_params.get("format") == "json":
        st.text(health_check_json())
        return

    with st.spinner("Performing health check..."):
        health_data = perform_health_check()

    if health_data["status"] == "healthy":
        st.success(f"Application is healthy (checked in {health_data['duration_ms']}ms)")
    else:
        st.error(f"Application is unhealthy (checked in {health_data['duration_ms']}ms)")
        st.warning(f"Unhealthy services: {', '.join(health_data['unhealthy_services'])}")

    app_info = health_data["application"]
    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Name", app_info["name"])
    with col2:
        st.metric("Version", app_info["version"])
    with col3:
        st.metric("Environment", app_info["environment"])

    for service, check_result in health_data["checks"].items():
        with st.expander(f"{service.title()} Service", expanded=check_result["status"] != "healthy"):
            if check_result["status"] == "healthy":
                st.success(check_result["message"])
            else:
                st.error(check_result["message"])
            st.json(check_result)

    if error_counts := health_data.get("error_counts"):
        with st.expander("Handled Errors", expanded=False):
            st.json(error_counts)
