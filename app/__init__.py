# =============================================================================
# app/ - Application Wiring Package
# =============================================================================
# This package contains the process-level pieces of the record stores:
# - config.py: Environment variable loading and settings
# - exceptions.py: Error taxonomy shared by every store
# - bootstrap.py: Logging setup and record store construction
#
# The app layer is thin - it wires settings and the database client into
# the stores and delegates record logic to the core/ package.
# =============================================================================
