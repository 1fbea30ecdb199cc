"""Request orchestration.

- classify_pipeline: validate → build polygon → classify → measure → respond
"""
