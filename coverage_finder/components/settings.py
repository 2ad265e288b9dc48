"""
Sidebar panel for the scraping API key.
"""

from __future__ import annotations

import logging

import streamlit as st

from coverage_finder.coverage_service import CoverageService
from coverage_finder.credentials import CredentialStore
from coverage_finder.errors import CredentialError

logger = logging.getLogger(__name__)


def render_api_key_panel(credentials: CredentialStore, service: CoverageService) -> bool:
    """
    Render the Firecrawl API key panel.

    The panel stays expanded while no key is stored.

    Returns:
        True when a key is stored.
    """
    has_key = bool(credentials.get())

    with st.sidebar.expander("🔑 Firecrawl API key", expanded=not has_key):
        if has_key:
            st.success("API key configured. Coverage checks are enabled.")
        else:
            st.warning("No API key stored. Coverage checks will be skipped.")

        api_key = st.text_input("API key", type="password", key="api_key_input", placeholder="fc-...")
        st.caption("The key is stored in this browser's local storage only.")

        col_save, col_test, col_clear = st.columns(3)
        with col_save:
            save_clicked = st.button("Save", use_container_width=True)
        with col_test:
            test_clicked = st.button("Test", use_container_width=True)
        with col_clear:
            clear_clicked = st.button("Clear", use_container_width=True, disabled=not has_key)

        if test_clicked:
            with st.spinner("Testing API key..."):
                ok = service.test_credential(api_key)
            if ok:
                st.success("The API key works.")
            else:
                st.error("The API key was rejected or the service is unreachable.")

        if save_clicked:
            try:
                credentials.save(api_key)
                st.success("API key saved.")
                has_key = True
            except CredentialError as e:
                st.error(str(e))

        if clear_clicked:
            credentials.clear()
            st.info("API key removed.")
            has_key = False

    return has_key
