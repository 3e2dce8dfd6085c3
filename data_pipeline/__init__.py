"""Schema creation and data loading for the NFL statistics database."""
