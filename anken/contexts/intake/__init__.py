"""
Intake Context

Responsibilities:
- Normalizes raw posting text (full-width forms, whitespace)
- Slices labelled sections out of loosely formatted Japanese postings
- Extracts scalar fields, skill lists and language/experience pairs

Owns: Project posting parsing logic
Never: Touches form state or calls the AI normalization endpoint
"""
