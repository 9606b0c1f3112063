"""Job history domain: listing, hydration, progress and debug views."""
