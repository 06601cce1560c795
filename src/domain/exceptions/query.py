class InvalidQuery(ValueError):
    """Raised when a rider query carries an unknown filter value."""
