"""UI utilities for the student screens."""

import json
from typing import Any, Dict, Optional

import streamlit as st

from ..state import Photo

# Constants
SUPPORTED_FORMATS = ["jpg", "jpeg", "png", "webp"]


def display_json(data: Any) -> None:
    """Display formatted JSON data.

    Args:
        data: Data to display as JSON
    """
    if data:
        st.code(json.dumps(data, indent=2, ensure_ascii=False), language="json")


def request_details(url: str, fields: Dict[str, str], photo: Optional[Photo]) -> None:
    """Show what is about to be posted, collapsed by default."""
    with st.expander("Detalles de la solicitud", expanded=False):
        st.write(f"Endpoint: {url}")
        display_json(fields)
        if photo is not None:
            st.write(f"Foto: {photo.filename} ({photo.content_type}, {len(photo.data)} bytes)")
