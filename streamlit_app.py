"""
streamlit_app.py
----------------
Browser front-end for the keyword index.
Wraps analyze_document() and Persister.lookup() from the eddy package.

Run with:
    streamlit run streamlit_app.py
"""

import sys
from pathlib import Path

import streamlit as st

# Make project root importable
sys.path.insert(0, str(Path(__file__).parent))

from eddy.config import load_settings
from eddy.errors import ExtractionError, StoreError
from eddy.extraction_client import build_extraction_client
from eddy.extractor import analyze_document
from eddy.persister import build_persister

# ── Page config ────────────────────────────────────────────────────────────────

st.set_page_config(
    page_title="Keyword Index",
    page_icon="🔑",
    layout="centered",
)

settings = load_settings()

# ── Sidebar ────────────────────────────────────────────────────────────────────

with st.sidebar:
    st.header("⚙️ Configuration")
    st.text(f"Extraction backend: {settings.extraction_backend}")
    st.text(f"Store: {settings.redis_url}")
    min_score = st.slider(
        "Minimum confidence", min_value=0.0, max_value=1.0, value=settings.min_score, step=0.05,
    )

# ── Clients (cached so they are built once) ────────────────────────────────────

@st.cache_resource(show_spinner="Connecting…")
def load_clients(backend: str, redis_url: str):
    """Builds the extraction client and persister for this session."""
    return build_extraction_client(settings), build_persister(settings)


client, persister = load_clients(settings.extraction_backend, settings.redis_url)

# ── Main UI ────────────────────────────────────────────────────────────────────

st.title("🔑 Keyword Index")

analyze_tab, lookup_tab = st.tabs(["Analyze a document", "Look up a keyword"])

with analyze_tab:
    text = st.text_area("Document text", height=240)
    if st.button("Extract keywords", type="primary"):
        if not text.strip():
            st.warning("Paste some text first.")
        else:
            with st.spinner("Extracting key phrases…"):
                try:
                    keywords = analyze_document(
                        text,
                        client,
                        locale     = settings.locale,
                        chunk_size = settings.chunk_size,
                        max_chunks = settings.max_chunks,
                        min_score  = min_score,
                    )
                except ExtractionError as exc:
                    st.error(f"**Extraction failed:** {exc}")
                    st.stop()

            if keywords:
                st.subheader(f"{len(keywords)} keyword(s)")
                st.write(", ".join(f"`{k}`" for k in keywords))
            else:
                st.info("No phrase reached the confidence threshold.")

with lookup_tab:
    keyword = st.text_input("Keyword", placeholder="deployment pipeline")
    if st.button("Look up"):
        try:
            documents = persister.lookup(keyword)
        except StoreError as exc:
            st.error(f"**Store unavailable:** {exc}")
            st.stop()

        if documents:
            for doc_path in documents:
                st.markdown(f"- 📄 `{doc_path}`")
        else:
            st.info("No document is indexed under this keyword.")
