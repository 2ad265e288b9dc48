"""
Coverage Area Finder - Streamlit page.

Pick an antenna site and height, find businesses within radio range on
OpenStreetMap, and check their fiber coverage one by one.

Run with: streamlit run app.py
"""

import logging

import streamlit as st

from config import (
    DEFAULT_COORDINATES,
    DEFAULT_HEIGHT_M,
    LOG_DATE_FORMAT,
    LOG_FORMAT,
    LOG_LEVEL,
    SCRAPE_MIN_INTERVAL_S,
)
from coverage_finder import osm_client
from coverage_finder.address import city_from_address, format_address
from coverage_finder.browser_storage import BrowserStorage
from coverage_finder.components.results import render_results
from coverage_finder.components.settings import render_api_key_panel
from coverage_finder.coverage_service import CoverageService
from coverage_finder.credentials import CredentialStore
from coverage_finder.enrichment import EnrichmentRun, RunState
from coverage_finder.errors import QueryError, ValidationError
from coverage_finder.models import CategorySelection, CoverageStatus, LookupKind, SearchParameters
from coverage_finder.query_builder import CATEGORY_LABELS, build_query_clauses
from coverage_finder.radio_range import estimate_radius, format_radius_km
from coverage_finder.results_table import businesses_to_dataframe, dataframe_to_csv
from coverage_finder.utils.cache import CoverageCache
from coverage_finder.utils.rate_limiter import RateLimiter

logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
logger = logging.getLogger("coverage_area_finder")

st.set_page_config(page_title="Coverage Area Finder", page_icon="📡", layout="wide")


@st.cache_resource
def get_rate_limiter() -> RateLimiter:
    """One limiter for every session of this server process."""
    return RateLimiter(SCRAPE_MIN_INTERVAL_S, name="Firecrawl")


def get_service() -> CoverageService:
    """Per-session service; the browser storage binding is refreshed every run."""
    if "credentials" not in st.session_state:
        st.session_state["credentials"] = CredentialStore(BrowserStorage())
        st.session_state["coverage_cache"] = CoverageCache()
    else:
        st.session_state["credentials"].storage = BrowserStorage()

    return CoverageService(
        credentials=st.session_state["credentials"],
        cache=st.session_state["coverage_cache"],
        limiter=get_rate_limiter(),
    )


def run_search(params: SearchParameters, selection: CategorySelection, service: CoverageService) -> None:
    if not selection.any_selected():
        st.warning("No category selected. Select at least one business category.")
        return
    clauses = build_query_clauses(selection, params.lat, params.lon, params.radius)

    with st.spinner("Searching..."):
        businesses = osm_client.search(clauses)

    previous = st.session_state.get("enrichment_run")
    if previous is not None:
        previous.cancel()

    st.session_state["businesses"] = businesses
    st.session_state["center"] = (params.lat, params.lon)
    st.session_state["located_addresses"] = {}
    st.session_state["enrichment_run"] = EnrichmentRun(businesses, service)
    st.toast(f"Search complete: {len(businesses)} businesses found")


def run_enrichment(run: EnrichmentRun, placeholder) -> None:
    """Drive a coverage run, redrawing the result list after every step."""
    progress = st.progress(0.0, text="Checking fiber coverage...")
    warned_rate_limit = False
    total = max(len(run.businesses), 1)

    updates = iter(run)
    try:
        for update in updates:
            render_results(placeholder, update.businesses)
            progress.progress((update.index + 1) / total, text=f"Checking fiber coverage... {update.index + 1}/{total}")
            if update.result is not None and update.result.kind is LookupKind.RATE_LIMITED and not warned_rate_limit:
                st.warning("The scraping service is rate limiting requests. Try those businesses again later.")
                warned_rate_limit = True
    except Exception:
        logger.exception("Unexpected error during coverage check")
        st.error("Coverage check stopped unexpectedly. Try again later.")
    finally:
        # A rerun interrupts the script mid-loop; close so the run settles as cancelled.
        updates.close()

    progress.empty()
    if run.state is RunState.COMPLETED:
        st.success(f"Coverage check finished: {run.summary.classified} businesses classified.")


def render_single_lookup(businesses, service: CoverageService) -> None:
    """Ad-hoc coverage check or address lookup for one business."""
    st.subheader("Single business lookup")
    labels = [
        f"{i + 1}. {b.name or 'Unnamed'} - {format_address(b.tags) or 'no address'}"
        for i, b in enumerate(businesses)
    ]
    index = st.selectbox("Business", range(len(businesses)), format_func=lambda i: labels[i])
    business = businesses[index]
    located = st.session_state.setdefault("located_addresses", {})

    col_coverage, col_address = st.columns(2)
    with col_coverage:
        check_clicked = st.button("Check coverage", use_container_width=True)
    with col_address:
        locate_clicked = st.button("Find address online", use_container_width=True)

    if locate_clicked:
        with st.spinner("Searching the map service..."):
            result = service.locate_address(business.name, business.lat, business.lon)
        if result.success and result.address:
            located[business.id] = result.address
            st.info(f"Address found: {result.address}")
        elif result.success:
            st.info("No address found for this business.")
        elif result.kind is LookupKind.RATE_LIMITED:
            st.warning("Rate limit reached. Wait a moment and retry.")
        else:
            st.error(f"Address lookup failed: {result.error}")

    if check_clicked:
        address = format_address(business.tags) or located.get(business.id, "")
        city = business.city or city_from_address(address)
        with st.spinner("Checking coverage..."):
            result = service.classify(city, address)
        if result.success:
            business.coverage_status = result.coverage
            business.coverage_error = None
            st.success(f"{business.name or 'Business'}: {result.coverage.value}")
        elif result.kind is LookupKind.MISSING_CREDENTIAL:
            st.warning("Configure the Firecrawl API key in the sidebar first.")
        elif result.kind is LookupKind.INVALID_ADDRESS:
            st.warning("This business has no usable address. Try 'Find address online'.")
        elif result.kind is LookupKind.RATE_LIMITED:
            st.warning("Rate limit reached. Wait a moment and retry.")
        else:
            business.coverage_status = CoverageStatus.ERROR
            business.coverage_error = result.error
            st.error(f"Coverage check failed: {result.error}")


def main() -> None:
    service = get_service()

    st.title("📡 Coverage Area Finder")
    st.caption("Estimate radio coverage and find businesses within range of an antenna")

    render_api_key_panel(service.credentials, service)

    col_params, col_results = st.columns([1, 2])

    with col_params:
        st.subheader("Search parameters")
        coordinates = st.text_input("Coordinates (latitude, longitude)", value=DEFAULT_COORDINATES,
                                    placeholder="e.g. 41.9028, 12.4964")
        height = st.text_input("Antenna height (m)", value=DEFAULT_HEIGHT_M)
        derived = estimate_radius(height)
        st.caption(f"Estimated radius: **{format_radius_km(derived)}**")
        manual_radius = st.text_input("Custom radius (m)", value="", placeholder=f"{int(derived)} (from height)")

        st.markdown("**Business categories**")
        selection = CategorySelection(
            lodging=st.checkbox(CATEGORY_LABELS["lodging"], value=True),
            commercial=st.checkbox(CATEGORY_LABELS["commercial"], value=True),
            industrial=st.checkbox(CATEGORY_LABELS["industrial"], value=False),
        )
        search_clicked = st.button("Start search", type="primary", use_container_width=True)

    with col_results:
        if search_clicked:
            try:
                params = SearchParameters.from_inputs(coordinates, height, manual_radius)
                run_search(params, selection, service)
            except ValidationError as e:
                st.warning(str(e))
            except QueryError as e:
                logger.error(f"Search failed: {e}")
                st.error("Unable to load data. Try again later.")
            except Exception:
                logger.exception("Unexpected error during search")
                st.error("Something went wrong. Try again later.")

        businesses = st.session_state.get("businesses", [])
        st.subheader(f"Results ({len(businesses)})")
        placeholder = st.empty()
        render_results(placeholder, businesses)

        run = st.session_state.get("enrichment_run")
        if run is not None and run.state is RunState.IDLE:
            run_enrichment(run, placeholder)
        elif run is not None and run.state is RunState.CANCELLED and not run.cancelled and businesses:
            # Interrupted by a page rerun rather than by a new search.
            if st.button("Resume coverage check"):
                st.session_state["enrichment_run"] = EnrichmentRun(businesses, service)
                st.rerun()

        if businesses:
            df = businesses_to_dataframe(businesses, st.session_state.get("center"))
            with st.expander("Map and table"):
                st.map(df[["lat", "lon"]])
                st.dataframe(df, use_container_width=True, hide_index=True)
            st.download_button("Download CSV", dataframe_to_csv(df), file_name="coverage_results.csv",
                               mime="text/csv")
            render_single_lookup(businesses, service)


main()
