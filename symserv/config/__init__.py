"""Configuration: module base constant and SYMSERV_* env settings."""
