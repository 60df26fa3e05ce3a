from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional
import streamlit as st


DEFAULT_LLM_BASE_URL = "https://ai.gateway.lovable.dev/v1"
DEFAULT_LLM_MODEL = "google/gemini-3-flash-preview"


# ---------------------- DATA CLASSES ----------------------

@dataclass
class LLMConfig:
    api_key: str
    base_url: str = DEFAULT_LLM_BASE_URL
    model: str = DEFAULT_LLM_MODEL


@dataclass
class EmailConfig:
    smtp_host: str
    smtp_port: int
    smtp_user: str
    smtp_password: str
    from_email: str
    from_name: str


@dataclass
class SupabaseConfig:
    url: str
    anon_key: str


@dataclass
class MapsConfig:
    api_key: str = ""


@dataclass
class ContactConfig:
    phone: str = "076 400 2332"
    whatsapp_number: str = "27764002332"
    email: str = "support@pure360.co.za"


@dataclass
class AppConfig:
    supabase: SupabaseConfig
    llm: LLMConfig
    email: Optional[EmailConfig] = None
    maps: MapsConfig = field(default_factory=MapsConfig)
    contact: ContactConfig = field(default_factory=ContactConfig)


# ---------------------- LOADING ----------------------

def load_config(secrets=None) -> AppConfig:
    if secrets is None:
        secrets = st.secrets

    # --- LLM gateway ---
    # Checks for [llm] section first, then falls back to a bare key
    if "llm" in secrets:
        llm = secrets["llm"]
        llm_cfg = LLMConfig(
            api_key=llm.get("api_key", ""),
            base_url=llm.get("base_url", DEFAULT_LLM_BASE_URL),
            model=llm.get("model", DEFAULT_LLM_MODEL),
        )
    else:
        llm_cfg = LLMConfig(api_key=secrets.get("llm_api_key", ""))

    # --- Email ---
    # Optional: without it confirmation emails are skipped
    email_cfg = None
    if "email" in secrets:
        email_cfg = EmailConfig(
            smtp_host=secrets["email"]["smtp_host"],
            smtp_port=int(secrets["email"]["smtp_port"]),
            smtp_user=secrets["email"]["smtp_user"],
            smtp_password=secrets["email"]["smtp_password"],
            from_email=secrets["email"]["from_email"],
            from_name=secrets["email"].get("from_name", "Pure360"),
        )

    maps_cfg = MapsConfig(api_key=secrets["maps"].get("api_key", "")) if "maps" in secrets else MapsConfig()

    contact_cfg = ContactConfig()
    if "contact" in secrets:
        contact = secrets["contact"]
        contact_cfg = ContactConfig(
            phone=contact.get("phone", contact_cfg.phone),
            whatsapp_number=contact.get("whatsapp_number", contact_cfg.whatsapp_number),
            email=contact.get("email", contact_cfg.email),
        )

    # --- Supabase ---
    supabase_cfg = SupabaseConfig(
        url=secrets["supabase"]["url"],
        anon_key=secrets["supabase"]["anon_key"],
    )

    return AppConfig(
        supabase=supabase_cfg,
        llm=llm_cfg,
        email=email_cfg,
        maps=maps_cfg,
        contact=contact_cfg,
    )
