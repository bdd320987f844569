# main.py
"""Main entry point for the Weathermap Streamlit application."""

import sys
import traceback

import streamlit as st

from src.logger_config import setup_logging
from src.paths import ensure_dirs
from src.ui import card_map, card_search
from src.ui.common import load_css

ensure_dirs()

# Setup logging
logger = setup_logging()


def main() -> None:
    """Initialize and render the Weathermap layout."""
    try:
        logger.info("Rendering Weathermap")
        st.set_page_config(
            page_title="Weathermap",
            layout="wide",
            page_icon="🌍",
        )
        load_css("style.css")

        # Kartta vasemmalla, haku ja sääkortit oikealla
        col_map, col_side = st.columns([3, 1], gap="medium")
        with col_map:
            card_map()
        with col_side:
            card_search()

    except KeyboardInterrupt:
        logger.info("Weathermap shutdown requested")
        sys.exit(0)
    except Exception as e:
        logger.error(f"Unhandled error: {str(e)}")
        logger.error(traceback.format_exc())
        st.error("Weathermap failed to render, see logs/weathermap.log")


if __name__ == "__main__":
    main()
