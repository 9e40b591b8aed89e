"""LLM provider clients.

promptrelay is provider-neutral. We implement minimal REST clients for:
- OpenAI Chat Completions compatible endpoint (OpenAI API or any server that speaks it)
- Google Gemini Generative Language API (v1beta)

Each client performs exactly one request per call and returns plain text.
Unit tests do not require network access.
"""
