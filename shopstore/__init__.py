"""shopstore - mock e-commerce backend over JSON-file-backed entity stores."""

__version__ = "1.0.0"
