"""GeniusPAS: AI-powered PAS exam generator."""
__version__ = "1.0.0"
