"""
Browser localStorage adapter for the credential store.

Wraps streamlit_local_storage so the API key survives page reloads.
"""

from __future__ import annotations

import logging
from typing import Optional
from uuid import uuid4

import streamlit as st
from streamlit_local_storage import LocalStorage

logger = logging.getLogger(__name__)

_SESSION_KEY = "_coverage_local_storage_key"
_OVERLAY_KEY = "_coverage_local_storage_writes"


def _session_storage_key() -> str:
    """Stable component key per browser session."""
    key = st.session_state.get(_SESSION_KEY)
    if not key:
        key = f"coverage_storage_{uuid4().hex}"
        st.session_state[_SESSION_KEY] = key
    return key


def _unwrap(raw, item_key: str) -> Optional[str]:
    """
    streamlit_local_storage may hand values back wrapped as {item_key: value}.
    """
    if raw is None:
        return None
    if isinstance(raw, dict):
        if item_key in raw:
            raw = raw[item_key]
        elif len(raw) == 1:
            raw = next(iter(raw.values()))
        else:
            return None
    text = str(raw or "").strip()
    return text or None


class BrowserStorage:
    """
    get_item/set_item/remove_item over the page's localStorage.

    A LocalStorage component only talks to the browser during the script
    run that created it, so build one BrowserStorage per run.
    """

    def __init__(self, storage: Optional[LocalStorage] = None):
        self._storage = storage or LocalStorage(key=_session_storage_key())

    @staticmethod
    def _writes() -> dict:
        # Writes reach the browser asynchronously; remember them for this session.
        return st.session_state.setdefault(_OVERLAY_KEY, {})

    def get_item(self, key: str) -> Optional[str]:
        writes = self._writes()
        if key in writes:
            return writes[key]
        return _unwrap(self._storage.getItem(key), key)

    def set_item(self, key: str, value: str) -> None:
        self._writes()[key] = value
        self._storage.setItem(key, value, key=f"set_{key}_{uuid4().hex[:8]}")
        logger.debug(f"Stored {key} in browser storage")

    def remove_item(self, key: str) -> None:
        self._writes()[key] = None
        self._storage.deleteItem(key, key=f"delete_{key}_{uuid4().hex[:8]}")
        logger.debug(f"Removed {key} from browser storage")
