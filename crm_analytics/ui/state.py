"""
Session state management for Streamlit app.
"""
import streamlit as st
from typing import Any, List, Optional


# =============================================================================
# DEFAULT VALUES
# =============================================================================

DEFAULTS = {
    "selected_pipeline_id": None,
    "show_weighted_forecast": False,
}


# =============================================================================
# STATE HELPERS
# =============================================================================

def init_state():
    """Initialize all session state keys with defaults."""
    for key, default in DEFAULTS.items():
        if key not in st.session_state:
            st.session_state[key] = default


def get_state(key: str) -> Any:
    """Get state value with default fallback."""
    init_state()
    return st.session_state.get(key, DEFAULTS.get(key))


def set_state(key: str, value: Any):
    """Set state value."""
    st.session_state[key] = value


# =============================================================================
# PIPELINE SELECTION
# =============================================================================

def resolve_pipeline_id(pipeline_ids: List[str]) -> Optional[str]:
    """
    Current pipeline, falling back to the first available one.

    A stored id that no longer exists is replaced.
    """
    selected = get_state("selected_pipeline_id")
    if selected in pipeline_ids:
        return selected
    if not pipeline_ids:
        return None
    set_state("selected_pipeline_id", pipeline_ids[0])
    return pipeline_ids[0]
