"""
Showing errors in the Streamlit interface.

Pages catch ``LensError`` and pass its ``ErrorInfo`` here; anything else that
escapes a page is caught by ``error_context`` and classified first.
"""

from typing import Any

import streamlit as st

from lens.error_handling import ErrorInfo, ErrorSeverity, handle_error
from lens.logging_config import get_logger

logger = get_logger(__name__)


def control_flow_exceptions() -> tuple[type[BaseException], ...]:
    """Streamlit's rerun/stop exceptions, which are control flow rather than errors."""
    try:
        from streamlit.runtime.scriptrunner_utils.exceptions import RerunException, StopException
    except ImportError:
        return ()
    return (RerunException, StopException)


class ErrorDisplayManager:
    """Renders errors as Streamlit alerts."""

    def display_error(self, error_info: ErrorInfo, show_details: bool = False) -> None:
        """
        Show the user message, as a warning for low and medium severity and as an error otherwise.

        Args:
            error_info: Structured error information
            show_details: Add an expander with code, category and details
        """
        if error_info.severity in (ErrorSeverity.LOW, ErrorSeverity.MEDIUM):
            st.warning(error_info.user_message)
        else:
            st.error(error_info.user_message)

        if show_details and error_info.details:
            with st.expander("Details", expanded=False):
                st.write("**Error code:**", error_info.code)
                st.write("**Category:**", error_info.category.value)
                st.write("**Time:**", error_info.timestamp.strftime("%Y-%m-%d %H:%M:%S"))
                for key, value in error_info.details.items():
                    st.write(f"- {key}: {value}")

        logger.info(
            "error_displayed_to_user",
            error_code=error_info.code,
            category=error_info.category.value,
            severity=error_info.severity.value,
        )

    def display_exception(
        self, exception: Exception, context: dict[str, Any] | None = None, show_details: bool = False
    ) -> None:
        self.display_error(handle_error(exception, context), show_details=show_details)

    def display_messages(self, messages: list[str]) -> None:
        """One error line per message, e.g. per rejected upload."""
        for message in messages:
            st.error(message)

    def display_warning_message(self, message: str) -> None:
        st.warning(message)


error_display_manager = ErrorDisplayManager()


def get_error_display_manager() -> ErrorDisplayManager:
    return error_display_manager


class StreamlitErrorContext:
    """
    Catches exceptions raised inside a block and displays them instead.

    Streamlit's control flow exceptions and non-``Exception`` errors such as
    ``KeyboardInterrupt`` propagate.
    """

    def __init__(self, error_message: str = "Something went wrong.", show_details: bool = False):
        self.error_message = error_message
        self.show_details = show_details

    def __enter__(self) -> "StreamlitErrorContext":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> bool:
        if exc_val is None or not isinstance(exc_val, Exception):
            return False
        if isinstance(exc_val, control_flow_exceptions()):
            return False

        logger.error("error_context_caught", context_message=self.error_message, error=str(exc_val))
        error_display_manager.display_exception(
            exception=exc_val,
            context={"context_message": self.error_message},
            show_details=self.show_details,
        )
        return True


def error_context(error_message: str = "Something went wrong.", show_details: bool = False) -> StreamlitErrorContext:
    return StreamlitErrorContext(error_message, show_details)
