from __future__ import annotations
from openai import OpenAI

# Small factory to build an OpenAI client from app config
def init_openai(api_key: str | None):
    if not api_key:
        raise RuntimeError("Missing OPENAI_API_KEY")
    return OpenAI(api_key=api_key)
