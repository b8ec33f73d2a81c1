"""
Autofill Context

Responsibilities:
- Holds the editable form state and its synchronized language views
- Merges heuristic drafts and AI-normalized results into the form
- Tracks in-flight AI requests so stale results are ignored

Owns: Form state and merge policy
Never: Parses raw text directly (delegates to the Intake context)
"""
