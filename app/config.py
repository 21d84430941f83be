from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

import streamlit as st


# ---------------------- DATA CLASSES ----------------------

@dataclass
class SupabaseConfig:
    url: str
    key: str


@dataclass
class EmailConfig:
    smtp_host: str
    smtp_port: int
    smtp_user: str
    smtp_password: str
    from_email: str
    from_name: str


@dataclass
class StorageConfig:
    inspections_path: str = "data/inspections.json"


@dataclass
class AppConfig:
    supabase: SupabaseConfig
    email: Optional[EmailConfig]
    storage: StorageConfig
    log_level: str = "INFO"
    company_name: str = "Sparkle Cleaning Services"


# ---------------------- LOADING ----------------------

def load_config(secrets: Optional[Mapping[str, Any]] = None) -> AppConfig:
    if secrets is None:
        secrets = st.secrets

    # --- Supabase ---
    supabase_cfg = SupabaseConfig(
        url=secrets["supabase"]["url"],
        key=secrets["supabase"]["key"],
    )

    # --- Email (optional) ---
    # ports are often stored as strings in secrets.toml
    email_cfg = None
    if "email" in secrets:
        email = secrets["email"]
        email_cfg = EmailConfig(
            smtp_host=email.get("smtp_host", ""),
            smtp_port=int(email.get("smtp_port", 587)),
            smtp_user=email.get("smtp_user", ""),
            smtp_password=email.get("smtp_password", ""),
            from_email=email.get("from_email", ""),
            from_name=email.get("from_name", ""),
        )

    # --- Local storage ---
    storage_cfg = StorageConfig()
    if "storage" in secrets:
        storage_cfg = StorageConfig(
            inspections_path=secrets["storage"].get("inspections_path", storage_cfg.inspections_path),
        )

    log_level = "INFO"
    if "logging" in secrets:
        log_level = str(secrets["logging"].get("level", log_level)).upper()

    return AppConfig(
        supabase=supabase_cfg,
        email=email_cfg,
        storage=storage_cfg,
        log_level=log_level,
        company_name=secrets.get("company_name", AppConfig.company_name),
    )
