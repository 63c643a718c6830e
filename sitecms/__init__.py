"""Site CMS API - admin content resources and public site reads."""

__version__ = "1.0.0"
