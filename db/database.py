# db/database.py

from supabase import create_client, Client
import streamlit as st

from db.store import DataStore


def get_supabase_client() -> Client:
    """
    Returns a cached Supabase client.
    Uses the key from [supabase] in secrets.toml; the admin panel needs a
    key whose policies allow writes to every management table.
    """

    if "supabase_client" not in st.session_state:
        url = st.secrets["supabase"]["url"]
        key = st.secrets["supabase"]["key"]
        st.session_state.supabase_client = create_client(url, key)

    return st.session_state.supabase_client


def get_store() -> DataStore:
    if "data_store" not in st.session_state:
        st.session_state.data_store = DataStore(get_supabase_client())
    return st.session_state.data_store
