"""
Sales Pipeline CRM Analytics

Main entry point for Streamlit app.
"""
import streamlit as st
from pathlib import Path

# Page config must be first Streamlit command
st.set_page_config(
    page_title="Pipeline CRM",
    page_icon="📊",
    layout="wide",
    initial_sidebar_state="expanded",
)

# Add project root to path
import sys
sys.path.insert(0, str(Path(__file__).parent))

from crm_analytics.config import config, configure_logging
from crm_analytics.data.loader import get_data_status, load_raw_table
from crm_analytics.data.schema import validate_schema, display_validation_result, get_column_info
from crm_analytics.ui.state import init_state


def main():
    """Main app entry point."""
    configure_logging()
    init_state()

    st.title("Pipeline CRM")
    st.caption("Tablero de oportunidades y analíticas de ventas")
    if not config.is_prod:
        st.sidebar.caption(f"Entorno: {config.app_env} · Zona horaria: {config.timezone}")

    status = get_data_status()
    missing_core = [name for name, info in status.items() if info["required"] and not info["exists"]]

    if missing_core:
        st.error("No data found!")
        st.markdown(f"""
        ### Setup Required

        Export the backend tables into: `{config.snapshot_dir}`

        Required files (`.parquet`, `.csv` or `.json` records):
        - `deals`
        - `stages`

        Optional files:
        - `users`, `accounts`, `goals`, `pipelines`
        """)
        st.info("Once data is in place, refresh this page.")
        return

    col1, col2 = st.columns([1, 4])

    with col1:
        st.markdown("### Quick Links")
        st.page_link("pages/1_Pipeline_Board.py", label="Tablero", icon="🗂️")
        st.page_link("pages/2_Analytics.py", label="Analíticas", icon="📈")

    with col2:
        st.markdown("### Data Status")
        for name, info in status.items():
            icon = "✅" if info["exists"] else ("❌" if info["required"] else "⚪")
            format_used = info["format"] or "missing"
            st.markdown(f"{icon} `{name}` ({format_used})")

        with st.spinner("Validating snapshots..."):
            for name, info in status.items():
                if not info["exists"]:
                    continue
                result = validate_schema(load_raw_table(name), name, strict=False)
                display_validation_result(result, name)

        with st.expander("Deal columns", expanded=False):
            st.dataframe(get_column_info(load_raw_table("deals")), use_container_width=True)


if __name__ == "__main__":
    main()
