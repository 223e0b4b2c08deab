"""Core (UI-agnostic) dashboard logic.

This package contains:
- record model and emptiness rules
- CSV parsing (sheet export -> records)
- statistics aggregation (records -> ranked summaries)
- filter normalization and table search
- sheet sync (HTTP fetch -> records)
- page compute functions (JSON-serializable payloads)
- escaped HTML fragments for the Streamlit UI
- chart helpers (Altair -> Vega-Lite spec dict)
"""
