"""Exhibition Curator - Streamlit application."""

import requests
import streamlit as st
from datetime import datetime

from art_curator.adapters import get_adapter_names
from art_curator.aggregator import Aggregator
from art_curator.config import Settings
from art_curator.errors import AllSourcesFailed, UnknownSource
from art_curator.exhibitions import ExhibitionStore, is_artwork_in_any
from art_curator.mappings import MEDIUM_LABELS, get_medium_categories
from art_curator.models import Artwork, SearchFilters, SearchQuery, SORT_OPTIONS
from art_curator.refine import refine

# Configuration
DEFAULT_PAGE_SIZE = 20
PAGE_SIZE_OPTIONS = [10, 20, 40]
FEATURED_LIMIT = 10
ALL_SOURCES_LABEL = "All collections"
ALL_MEDIUMS_LABEL = "All types"
GRID_COLUMNS = 4

SORT_LABELS = {
    "relevance": "Relevance",
    "title": "Title (A-Z)",
    "artist": "Artist (A-Z)",
    "date-newest": "Date (Newest First)",
    "date-oldest": "Date (Oldest First)",
}

st.set_page_config(page_title="Exhibition Curator", layout="wide")


# =============================================================================
# Session State Initialization
# =============================================================================

def init_session_state():
    """Initialize all session state variables."""
    defaults = {
        "debug_logs": [],
        "search_term": "",
        "last_result": None,  # SearchResult for the current query
        "last_error": None,
        "page": 1,
        "refine_page": 1,
        "selected": None,  # (source, id) of the artwork shown in detail
        # Filters
        "source": "all",
        "page_size": DEFAULT_PAGE_SIZE,
        "sort_by": "relevance",
        "medium": "",
        "exclude_xrays": True,
    }
    for key, default in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = default


init_session_state()


# =============================================================================
# Logging
# =============================================================================

def _append_log(logs: list, level: str, message: str):
    """Append a log entry to the given debug console buffer."""
    timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    logs.append(f"{timestamp} | {level:<5} | {message}")
    # Keep last 200 entries, in place so callbacks keep their reference
    del logs[:-200]


def log_event(message: str):
    _append_log(st.session_state.debug_logs, "INFO", message)


def log_error(message: str):
    _append_log(st.session_state.debug_logs, "ERROR", message)


def adapter_log_callback_for(logs: list):
    """Callback for adapters to log through our system.

    Adapters log from worker threads, which have no Streamlit script
    context, so the callback closes over the session's list instead of
    touching st.session_state.
    """
    def callback(level: str, message: str):
        _append_log(logs, level, message)

    return callback


# =============================================================================
# Resources
# =============================================================================

@st.cache_resource
def get_settings() -> Settings:
    return Settings.from_env()


@st.cache_resource
def get_http_session() -> requests.Session:
    """Connection pool shared by every browser session."""
    return requests.Session()


@st.cache_resource
def get_store() -> ExhibitionStore:
    return ExhibitionStore(get_settings().exhibitions_path)


def aggregator() -> Aggregator:
    """This browser session's aggregator, logging to its own debug console."""
    if "aggregator" not in st.session_state:
        agg = Aggregator.from_settings(get_settings(), session=get_http_session())
        agg.set_logger(adapter_log_callback_for(st.session_state.debug_logs))
        st.session_state.aggregator = agg
    return st.session_state.aggregator


@st.cache_data(ttl=3600, show_spinner=False)
def load_featured(exclude_xrays: bool) -> list[dict]:
    # Shared across sessions, so no session's console gets these logs
    agg = Aggregator.from_settings(get_settings(), session=get_http_session())
    artworks = agg.get_featured_artworks(FEATURED_LIMIT, exclude_xrays)
    return [a.to_dict() for a in artworks]


# =============================================================================
# Searching
# =============================================================================

def run_search():
    """Run the current query against the selected collections."""
    term = st.session_state.search_term.strip()
    if not term:
        st.session_state.last_result = None
        return

    query = SearchQuery(
        search_term=term,
        page=st.session_state.page,
        page_size=st.session_state.page_size,
        sources=(st.session_state.source,),
        filters=SearchFilters(
            exclude_xrays=st.session_state.exclude_xrays,
            sort_by=st.session_state.sort_by,
            medium=st.session_state.medium,
        ),
    )

    log_event(f"Searching for {term!r} (page {query.page})")
    try:
        st.session_state.last_result = aggregator().search_all_collections(query)
        st.session_state.last_error = None
    except AllSourcesFailed as e:
        log_error(str(e))
        st.session_state.last_result = None
        st.session_state.last_error = (
            "We couldn't reach any museum collection right now. Please try again later."
        )
    st.session_state.refine_page = 1


def on_query_change():
    st.session_state.page = 1
    run_search()


def go_to_page(page: int):
    st.session_state.page = page
    run_search()


# =============================================================================
# UI Components
# =============================================================================

def render_sidebar():
    """Render the sidebar with filters and debug console."""
    with st.sidebar:
        st.subheader("Filters")

        adapter_names = get_adapter_names()
        source_options = ["all"] + list(adapter_names.keys())
        st.selectbox(
            "Collection",
            source_options,
            format_func=lambda s: ALL_SOURCES_LABEL if s == "all" else adapter_names[s],
            key="source",
            on_change=on_query_change,
        )

        st.selectbox(
            "Sort by",
            list(SORT_OPTIONS),
            format_func=lambda s: SORT_LABELS.get(s, s),
            key="sort_by",
        )

        st.selectbox(
            "Type",
            [""] + get_medium_categories(),
            format_func=lambda m: MEDIUM_LABELS.get(m, ALL_MEDIUMS_LABEL),
            key="medium",
            on_change=on_query_change,
        )

        st.selectbox("Results per page", PAGE_SIZE_OPTIONS, key="page_size", on_change=on_query_change)

        st.checkbox(
            "Hide X-rays and radiographs",
            key="exclude_xrays",
            on_change=on_query_change,
        )

        # Debug console
        with st.expander("Debug Console", expanded=False):
            if st.button("Clear Logs"):
                st.session_state.debug_logs.clear()
            log_text = "\n".join(st.session_state.debug_logs) if st.session_state.debug_logs else "No logs yet."
            st.code(log_text, language=None)


def render_add_to_exhibition(artwork: Artwork, key_prefix: str):
    """Exhibition picker for one artwork."""
    store = get_store()
    if not store.exhibitions:
        st.caption("Create an exhibition to start collecting.")
        return

    if is_artwork_in_any(store.state, artwork):
        st.caption("✓ In an exhibition")

    options = {e.id: e.name for e in store.exhibitions}
    target = st.selectbox(
        "Exhibition",
        list(options),
        format_func=options.get,
        key=f"{key_prefix}-target",
        label_visibility="collapsed",
    )
    if st.button("Add to exhibition", key=f"{key_prefix}-add"):
        store.add(target, artwork)
        log_event(f"Added {artwork.source}:{artwork.id} to {options[target]}")
        st.toast(f"Added to {options[target]}")


def render_artwork_grid(artworks: list[Artwork], key_prefix: str, allow_add: bool = True):
    """Render artworks as a grid of cards."""
    columns = st.columns(GRID_COLUMNS)
    for index, artwork in enumerate(artworks):
        card_key = f"{key_prefix}-{artwork.source}-{artwork.id}"
        with columns[index % GRID_COLUMNS]:
            if artwork.thumbnail_url or artwork.image_url:
                st.image(artwork.thumbnail_url or artwork.image_url, use_container_width=True)
            st.markdown(f"**{artwork.title}**")
            st.caption(f"{artwork.artist} · {artwork.date}")
            if st.button("Details", key=f"{card_key}-details"):
                st.session_state.selected = artwork.key
                st.rerun()
            if allow_add:
                render_add_to_exhibition(artwork, card_key)


def render_pagination(pagination, on_page, key: str):
    """Previous/next controls."""
    col_prev, col_info, col_next = st.columns([1, 2, 1])
    with col_prev:
        if st.button("⬅️ Previous", key=f"{key}-prev", disabled=pagination.page <= 1):
            on_page(pagination.page - 1)
            st.rerun()
    with col_info:
        st.caption(f"Page {pagination.page} of {max(pagination.total_pages, 1)}")
    with col_next:
        if st.button("Next ➡️", key=f"{key}-next", disabled=not pagination.has_more):
            on_page(pagination.page + 1)
            st.rerun()


def set_refine_page(page: int):
    st.session_state.refine_page = page


def render_results():
    """Render the current search result, refined client-side."""
    if st.session_state.last_error:
        st.error(st.session_state.last_error)
        return

    result = st.session_state.last_result
    if result is None:
        return

    adapter_names = get_adapter_names()
    queried = ", ".join(adapter_names.get(s, s) for s in result.sources)
    st.caption(f"About {result.pagination.total} results from {queried}")

    refined = refine(
        result.artworks,
        sort_by=st.session_state.sort_by,
        medium=st.session_state.medium,
        page=st.session_state.refine_page,
        page_size=st.session_state.page_size,
    )

    if not refined.artworks:
        st.info(
            f"No results found for \"{st.session_state.search_term}\". "
            "Try a different search term or collection."
        )
    else:
        render_artwork_grid(refined.artworks, "search")

    if refined.pagination.total_pages > 1:
        st.caption("Pages within these results")
        render_pagination(refined.pagination, set_refine_page, "refine")

    st.caption("Museum result pages")
    render_pagination(result.pagination, go_to_page, "upstream")


def render_featured():
    """Render the featured panel; it is best-effort and may be empty."""
    st.markdown("#### Featured")
    featured = [Artwork.from_dict(a) for a in load_featured(st.session_state.exclude_xrays)]
    if not featured:
        st.caption("Featured artworks are unavailable right now.")
        return
    render_artwork_grid(featured, "featured")


def render_artwork_detail(source: str, artwork_id: str):
    """Render one artwork fetched from its museum."""
    if st.button("⬅️ Back"):
        st.session_state.selected = None
        st.rerun()

    try:
        artwork = aggregator().get_artwork_by_id(artwork_id, source)
    except UnknownSource as e:
        log_error(str(e))
        st.error("Unknown collection.")
        return

    if artwork is None:
        st.info("This artwork could not be found.")
        return

    col_image, col_meta = st.columns([3, 2], gap="large")

    with col_image:
        if artwork.image_url:
            st.image(artwork.image_url, use_container_width=True)
        else:
            st.caption("No image available.")

    with col_meta:
        st.subheader(artwork.title)
        source_name = get_adapter_names().get(artwork.source, artwork.source)
        st.caption(f"Source: {source_name}")

        meta_left, meta_right = st.columns(2)
        metadata_fields = [
            ("Artist", artwork.artist),
            ("Date", artwork.date),
            ("Medium", artwork.medium),
            ("Dimensions", artwork.dimensions),
            ("Department", artwork.department),
            ("Culture", artwork.culture),
            ("Provenance", artwork.provenance),
        ]
        for index, (label, value) in enumerate(metadata_fields):
            if not value:
                continue
            target_col = meta_left if index % 2 == 0 else meta_right
            target_col.write(f"**{label}:** {value}")

        if artwork.description:
            st.text_area("Description", value=artwork.description, height=100, disabled=True)
        if artwork.object_url:
            st.markdown(f"[View on museum website]({artwork.object_url})")

        render_add_to_exhibition(artwork, f"detail-{artwork.source}-{artwork.id}")


def render_exhibitions():
    """Create, edit, browse and prune exhibitions."""
    store = get_store()

    with st.form("new-exhibition", clear_on_submit=True):
        name = st.text_input("Name")
        description = st.text_area("Description", height=80)
        if st.form_submit_button("Create exhibition") and name.strip():
            exhibition = store.create(name.strip(), description.strip())
            log_event(f"Created exhibition {exhibition.id}")

    if not store.exhibitions:
        st.info("No exhibitions yet.")
        return

    for exhibition in store.exhibitions:
        with st.expander(f"{exhibition.name} ({len(exhibition.artworks)})", expanded=False):
            if exhibition.description:
                st.caption(exhibition.description)

            new_name = st.text_input("Name", value=exhibition.name, key=f"{exhibition.id}-name")
            new_description = st.text_area(
                "Description", value=exhibition.description, height=80, key=f"{exhibition.id}-description"
            )
            col_rename, col_delete = st.columns(2)
            with col_rename:
                if st.button("Save details", key=f"{exhibition.id}-rename"):
                    store.rename(exhibition.id, new_name.strip() or None, new_description.strip())
                    log_event(f"Updated exhibition {exhibition.id}")
                    st.rerun()
            with col_delete:
                if st.button("Delete exhibition", key=f"{exhibition.id}-delete", type="secondary"):
                    store.delete(exhibition.id)
                    log_event(f"Deleted exhibition {exhibition.id}")
                    st.rerun()

            for artwork in exhibition.artworks:
                col_thumb, col_text, col_remove = st.columns([1, 3, 1])
                with col_thumb:
                    if artwork.thumbnail_url:
                        st.image(artwork.thumbnail_url, use_container_width=True)
                with col_text:
                    st.markdown(f"**{artwork.title}**")
                    st.caption(f"{artwork.artist} · {artwork.date}")
                with col_remove:
                    if st.button("Remove", key=f"{exhibition.id}-{artwork.source}-{artwork.id}-remove"):
                        store.remove(exhibition.id, artwork.id, artwork.source)
                        st.rerun()


# =============================================================================
# Main Application
# =============================================================================

def main():
    """Main application entry point."""
    render_sidebar()

    st.markdown("### Exhibition Curator")

    if st.session_state.selected:
        source, artwork_id = st.session_state.selected
        render_artwork_detail(source, artwork_id)
        st.stop()

    tab_search, tab_exhibitions = st.tabs(["Search", "Exhibitions"])

    with tab_search:
        st.text_input(
            "Search artworks",
            key="search_term",
            placeholder="e.g. sunflowers, Rembrandt, Japanese prints",
            on_change=on_query_change,
        )
        if st.session_state.search_term.strip():
            render_results()
        else:
            render_featured()

    with tab_exhibitions:
        render_exhibitions()


if __name__ == "__main__":
    main()
