"""
ANKEN - Automated Normalization of Kyujin (job posting) ENtries

A heuristic intake system that turns free-form Japanese SES job postings into
structured, form-ready project records.

Architecture:
- Intake Context: Text normalization, section slicing and field extraction
- Autofill Context: Confidence-gated merging of heuristic and AI results into form state
"""

__version__ = "0.1.0"
