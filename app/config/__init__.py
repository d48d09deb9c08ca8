# =============================================================================
# Django Project Configuration Package
# =============================================================================
# settings.py holds the single environment-driven settings module.
# =============================================================================
