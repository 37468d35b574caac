# src/draft_kit/observability/names.py

"""Standard metric names for draft-kit observability.

Use these constants instead of hardcoded strings for consistency
across the codebase.

Note: All duration metrics are in milliseconds by convention.
"""

# ============================================================================
# Autosave Metrics
# ============================================================================

# Duration
CHAPTER_SAVE_DURATION = "chapter_save_duration"
CHAPTER_LOAD_DURATION = "chapter_load_duration"

# Counters
CHAPTER_SAVES_TOTAL = "chapter_saves_total"
CHAPTER_SAVE_ERRORS_TOTAL = "chapter_save_errors_total"
CHAPTER_LOAD_ERRORS_TOTAL = "chapter_load_errors_total"
SAVES_COALESCED_TOTAL = "saves_coalesced_total"


# ============================================================================
# Document Metrics
# ============================================================================

# Counters
DOCUMENT_NORMALIZATIONS_TOTAL = "document_normalizations_total"

# Gauges
DOCUMENT_PARAGRAPHS = "document_paragraphs"


# ============================================================================
# Search Metrics
# ============================================================================

# Duration
SEARCH_DURATION = "search_duration"

# Counters
SEARCHES_TOTAL = "searches_total"
SEARCH_REPLACEMENTS_TOTAL = "search_replacements_total"

# Gauges
SEARCH_MATCHES = "search_matches"


# ============================================================================
# Annotation Metrics
# ============================================================================

# Duration
ANNOTATION_SCAN_DURATION = "annotation_scan_duration"

# Gauges
ANNOTATION_TODOS = "annotation_todos"
ANNOTATION_HEADINGS = "annotation_headings"
